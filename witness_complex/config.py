"""witness_complex.config

Centralised configuration + reproducibility helpers.
"""

from __future__ import annotations

from typing import Any, Dict

import importlib.metadata as md
import random

import numpy as np


def default_config() -> Dict[str, Any]:
    """Return a *copy* of the default configuration.

    The defaults build a weak witness complex on 32 furthest-point landmarks.
    You can override any key in the returned dict.
    """
    return {
        # --- landmark selection ---
        "landmark_strategy": "furthest",   # "furthest" | "random"
        "nb_landmarks": 32,
        "first_landmark": None,            # furthest-point only; None = drawn from random_seed

        # --- construction ---
        "variant": "weak",                 # "weak" | "strong"
        "nearest_k": None,                 # weak only; None = ambient dimension + 1
        "density": None,                   # weak only; reserved, not consumed
        "max_alpha_square": 0.0,           # strong only; squared relaxation radius
        "limit_dimension": None,           # strong only; None = no limit
        "n_jobs": 1,                       # strong only; worker threads planning insertions

        # --- reproducibility ---
        "random_seed": 0,
    }


def set_global_seeds(seed: int) -> None:
    """Best-effort reproducibility across numpy / python."""
    random.seed(seed)
    np.random.seed(seed)


def get_library_versions() -> Dict[str, str]:
    """Collect versions of key libraries for provenance."""
    versions: Dict[str, str] = {}

    def _add(pkg: str) -> None:
        try:
            versions[pkg] = md.version(pkg)
        except md.PackageNotFoundError:
            pass

    for pkg in ["numpy", "scipy", "gudhi"]:
        _add(pkg)
    return versions
