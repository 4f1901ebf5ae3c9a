"""witness_complex.active

Active witnesses: the witnesses still able to justify new simplices.

An `ActiveWitness` is a plain value holding the witness id, how many
landmarks of its row have been consumed, and the next landmark (or None once
its provider is exhausted). It never holds an iterator into the row's
storage; the provider is asked for the next pair when the cursor moves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from .errors import InvalidStateError
from .nearest import IncrementalNearestLandmarks
from .schema import LandmarkDistance, NearestLandmarkRow


# witness_id, position -> pair at that position, or None past the end
PairSource = Callable[[int, int], Optional[LandmarkDistance]]


@dataclass
class ActiveWitness:
    witness_id: int
    consumed: int = 0
    cached_next: Optional[LandmarkDistance] = None

    @property
    def exhausted(self) -> bool:
        return self.cached_next is None


def row_source(rows: List[NearestLandmarkRow]) -> PairSource:
    """PairSource reading from materialised rows."""

    def _pair(witness_id: int, position: int) -> Optional[LandmarkDistance]:
        row = rows[witness_id]
        if position < len(row):
            return row[position]
        return None

    return _pair


def stream_source(streams: Dict[int, IncrementalNearestLandmarks]) -> PairSource:
    """PairSource pulling from lazy per-witness streams.

    A stream never rewinds: asking for a position behind what it has already
    released raises InvalidStateError. Asking further ahead consumes the gap.
    """

    def _pair(witness_id: int, position: int) -> Optional[LandmarkDistance]:
        stream = streams[witness_id]
        if position < stream.consumed:
            raise InvalidStateError(
                f"witness {witness_id}: position {position} is behind the stream ({stream.consumed} consumed)"
            )
        while stream.consumed < position:
            if stream.next() is None:
                return None
        return stream.peek()

    return _pair


@dataclass
class ActiveWitnessTracker:
    """Ordered set of active witnesses with one-way pruning.

    Once pruned a witness cannot be added back, so the number of active
    witnesses never increases.
    """

    source: PairSource
    _active: Dict[int, ActiveWitness] = field(default_factory=dict)
    _pruned: set = field(default_factory=set)
    history: List[int] = field(default_factory=list)

    def add(self, witness_id: int, consumed: int = 0) -> ActiveWitness:
        if witness_id in self._pruned:
            raise InvalidStateError(f"witness {witness_id} was pruned and cannot be re-activated")
        if self.history and len(self._active) + 1 > self.history[-1]:
            raise InvalidStateError("witnesses cannot be added once pruning has started")
        aw = ActiveWitness(witness_id, consumed, self.source(witness_id, consumed))
        self._active[witness_id] = aw
        return aw

    def get(self, witness_id: int) -> ActiveWitness:
        return self._active[witness_id]

    def advance(self, witness_id: int) -> ActiveWitness:
        """Move the cursor forward by one landmark."""
        aw = self._active[witness_id]
        aw.consumed += 1
        aw.cached_next = self.source(witness_id, aw.consumed)
        return aw

    def prune(self, witness_id: int) -> None:
        """Remove permanently. Pruning twice is a no-op."""
        if self._active.pop(witness_id, None) is not None:
            self._pruned.add(witness_id)

    def checkpoint(self) -> int:
        """Record the current size in `history` and return it."""
        self.history.append(len(self._active))
        return self.history[-1]

    def is_pruned(self, witness_id: int) -> bool:
        return witness_id in self._pruned

    def __len__(self) -> int:
        return len(self._active)

    def __bool__(self) -> bool:
        return bool(self._active)

    def __contains__(self, witness_id: int) -> bool:
        return witness_id in self._active

    def __iter__(self) -> Iterator[ActiveWitness]:
        # snapshot, so pruning while iterating is safe
        return iter(list(self._active.values()))
