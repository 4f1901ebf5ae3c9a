"""witness_complex.errors

Exceptions raised by the construction engines.

Pruning and early termination are ordinary control flow and never surface
here; these are reserved for calls that cannot produce a valid complex.
"""

from __future__ import annotations


class WitnessComplexError(Exception):
    """Base class for every error raised by this package."""


class InvalidStateError(WitnessComplexError, RuntimeError):
    """The complex store is not in a state the operation can start from."""


class InvalidArgumentError(WitnessComplexError, ValueError):
    """A parameter is out of its admissible range."""


class MalformedInputError(WitnessComplexError, ValueError):
    """A nearest-landmark row or table is inconsistent with the landmark set."""
