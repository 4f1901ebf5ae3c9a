"""witness_complex.strong

Strong witness complex with a relaxation parameter.

For a witness w with squared distance d0 to its nearest landmark, every
landmark at squared distance strictly below d0 + max_alpha_square is
"seen" by w. The landmarks seen by w, taken in order of distance, form a
growing simplex; each prefix is inserted with its faces, with filtration
value (distance of the last landmark) - d0.

When a dimension cap is given, prefixes stop growing at limit_dimension + 1
vertices. Each further landmark seen by w is joined to every
limit_dimension-subset of the landmarks seen before it, so all the capped
faces that the larger simplex would have implied are still present.

Witnesses are independent of each other. With `n_jobs > 1` the insertions
for each witness are computed in worker threads and written to the store by
the calling thread only.

Each witness is driven as an `ActiveWitness`: its cursor moves once per
landmark taken, and it is pruned as soon as its next landmark is missing or
at/beyond the relaxation bound.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .active import ActiveWitnessTracker, stream_source
from .errors import InvalidArgumentError, InvalidStateError
from .nearest import IncrementalNearestLandmarks, LandmarkIndex
from .schema import Simplex
from .store import ComplexStore
from .utils import as_point_array, combinations_of


def witnessed_simplices(
    tracker: ActiveWitnessTracker,
    witness_id: int,
    max_alpha_square: float,
    limit_dimension: int,
) -> Iterator[Tuple[Simplex, float]]:
    """Simplices witnessed by one active witness, in insertion order.

    The witness must already be in `tracker`; its source yields
    `(landmark_id, squared_distance)` in ascending order. The cursor is
    advanced once per landmark taken, and the witness is pruned as soon as
    its next landmark is missing or at/beyond the relaxation bound.
    """
    aw = tracker.get(witness_id)
    first = aw.cached_next
    if first is None:
        tracker.prune(witness_id)
        return
    d0 = first[1]
    lim_dist2 = d0 + max_alpha_square
    prefix: List[int] = [first[0]]
    tracker.advance(witness_id)
    yield (first[0],), 0.0

    while aw.cached_next is not None and aw.cached_next[1] < lim_dist2:
        landmark_id, d = aw.cached_next
        tracker.advance(witness_id)
        filtration = d - d0
        if len(prefix) < limit_dimension + 1:
            prefix.append(landmark_id)
            yield tuple(prefix), filtration
        else:
            for face in combinations_of(prefix, limit_dimension):
                yield face + (landmark_id,), filtration
            prefix.append(landmark_id)
    tracker.prune(witness_id)


class StrongWitnessComplex:
    """Strong witness complex of a landmark set and a witness set.

    Parameters
    ----------
    landmarks:
        (nbL, D) landmark points. Landmark ids (complex vertices) are row numbers.
    witnesses:
        (N, D) witness points.
    batch_size:
        Initial batch size of the incremental nearest-neighbour queries.
    """

    def __init__(self, landmarks: ArrayLike, witnesses: ArrayLike, batch_size: int = 4):
        self.landmarks = as_point_array(landmarks, "landmarks")
        self.witnesses = as_point_array(witnesses, "witnesses")
        if self.landmarks.shape[0] and self.witnesses.shape[0] and self.landmarks.shape[1] != self.witnesses.shape[1]:
            raise InvalidArgumentError(
                f"landmarks live in R^{self.landmarks.shape[1]} but witnesses in R^{self.witnesses.shape[1]}"
            )
        self.landmark_index = LandmarkIndex(self.landmarks, batch_size=batch_size)
        self.witness_exits: Dict[str, int] = {"bound": 0, "exhausted": 0}

    def get_point(self, vertex: int) -> NDArray[np.float64]:
        """Coordinates of landmark `vertex`."""
        return self.landmarks[vertex]

    def _plan(self, witness_id: int, max_alpha_square: float, limit: int) -> Tuple[List[Tuple[Simplex, float]], bool]:
        # a private tracker per call; worker threads must not share one
        streams: Dict[int, IncrementalNearestLandmarks] = {}
        tracker = ActiveWitnessTracker(stream_source(streams))
        streams[witness_id] = self.landmark_index.query_incremental(self.witnesses[witness_id])
        aw = tracker.add(witness_id)
        plan = list(witnessed_simplices(tracker, witness_id, max_alpha_square, limit))
        return plan, aw.exhausted

    def create_complex(
        self,
        store: ComplexStore,
        max_alpha_square: float,
        limit_dimension: Optional[int] = None,
        *,
        n_jobs: int = 1,
        verbose: bool = False,
    ) -> bool:
        """Fill `store` with the strong witness complex of relaxation `max_alpha_square`.

        Parameters
        ----------
        store:
            Empty complex store.
        max_alpha_square:
            Squared relaxation parameter, >= 0.
        limit_dimension:
            Maximal dimension of the complex, >= 0. None means no limit.
        n_jobs:
            Worker threads computing per-witness insertions.
        verbose:
            Print basic progress.

        Returns
        -------
        True once the construction has terminated. `witness_exits` then counts
        the witnesses pruned at the relaxation bound and those that ran out of
        landmarks.
        """
        nbL = int(self.landmarks.shape[0])
        if store.num_vertices() > 0:
            raise InvalidStateError("strong witness complex cannot create complex - complex is not empty")
        if max_alpha_square < 0:
            raise InvalidArgumentError("squared relaxation parameter must be non-negative")
        if limit_dimension is not None and limit_dimension < 0:
            raise InvalidArgumentError("limit dimension must be non-negative")
        limit = nbL if limit_dimension is None else int(limit_dimension)
        self.witness_exits = {"bound": 0, "exhausted": 0}

        for v in range(nbL):
            store.insert_simplex((v,), 0.0)
        complex_dim = 0 if nbL else -1
        if nbL == 0:
            store.set_dimension(complex_dim)
            return True

        nbW = int(self.witnesses.shape[0])
        if verbose:
            print(f"[witness_complex] strong: {nbW} witnesses, {nbL} landmarks, alpha^2={max_alpha_square}")

        if n_jobs > 1:
            with ThreadPoolExecutor(max_workers=int(n_jobs)) as pool:
                plans = pool.map(lambda w: self._plan(w, max_alpha_square, limit), range(nbW))
                # single writer: only this thread touches the store
                for plan, exhausted in plans:
                    for simplex, filtration in plan:
                        store.insert_simplex_and_subfaces(simplex, filtration)
                        complex_dim = max(complex_dim, len(simplex) - 1)
                    self.witness_exits["exhausted" if exhausted else "bound"] += 1
        else:
            streams: Dict[int, IncrementalNearestLandmarks] = {}
            tracker = ActiveWitnessTracker(stream_source(streams))
            for w in range(nbW):
                streams[w] = self.landmark_index.query_incremental(self.witnesses[w])
                aw = tracker.add(w)
                for simplex, filtration in witnessed_simplices(tracker, w, max_alpha_square, limit):
                    store.insert_simplex_and_subfaces(simplex, filtration)
                    complex_dim = max(complex_dim, len(simplex) - 1)
                # pruned by now; its stream is no longer needed
                del streams[w]
                self.witness_exits["exhausted" if aw.exhausted else "bound"] += 1

        store.set_dimension(complex_dim)
        if verbose:
            print(f"[witness_complex] strong: complex dimension {complex_dim}, "
                  f"{self.witness_exits['bound']} witnesses pruned at the bound")
        return True
