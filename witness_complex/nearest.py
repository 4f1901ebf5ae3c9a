"""witness_complex.nearest

Nearest-landmark providers.

Every provider exposes, for one witness, landmarks in ascending order of
distance, ties broken by the smaller landmark id. Two flavours:

1. Eager: `nearest_landmark_table` materialises the k nearest landmarks of
   every witness with a bounded max-heap (k = ambient dimension + 1 by default).
2. Lazy: `LandmarkIndex.query_incremental` returns a pull-based iterator over a
   `scipy.spatial.cKDTree`; engines take only as many landmarks as they need.

The lazy provider reports *squared* euclidean distances, to match the squared
relaxation parameter of the strong witness complex. The eager provider reports
euclidean distances unless `squared=True`.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

import heapq
import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial import cKDTree
from scipy.spatial.distance import cdist

from .errors import InvalidArgumentError, MalformedInputError
from .schema import LandmarkDistance, NearestLandmarkRow
from .utils import as_point_array, squared_distances_to


# =============================================================================
# Eager provider
# =============================================================================

def _bounded_top_k(distances: NDArray[np.float64], k: int) -> NearestLandmarkRow:
    """k smallest `(landmark_id, distance)` pairs, ascending."""
    # max-heap on (distance, id) through negated keys
    heap: List[tuple] = []
    for landmark_id, d in enumerate(distances):
        item = (-float(d), -landmark_id)
        if len(heap) < k:
            heapq.heappush(heap, item)
        elif item > heap[0]:
            heapq.heapreplace(heap, item)
    # draining a max-heap gives descending order
    drained = [heapq.heappop(heap) for _ in range(len(heap))]
    drained.reverse()
    return [(-neg_id, -neg_d) for neg_d, neg_id in drained]


def nearest_landmark_table(
    witnesses: ArrayLike,
    landmarks: ArrayLike,
    k: Optional[int] = None,
    *,
    squared: bool = False,
) -> List[NearestLandmarkRow]:
    """Rows of the k nearest landmarks for every witness.

    Parameters
    ----------
    witnesses:
        (N, D) witness points.
    landmarks:
        (nbL, D) landmark points; landmark ids are row numbers.
    k:
        Row length. Defaults to D + 1; clamped to nbL.
    squared:
        Report squared distances.

    Returns
    -------
    List of rows, one per witness, each strictly ascending in (distance, id).
    """
    W = as_point_array(witnesses, "witnesses")
    L = as_point_array(landmarks, "landmarks")
    if W.shape[0] and L.shape[0] and W.shape[1] != L.shape[1]:
        raise InvalidArgumentError(f"witnesses live in R^{W.shape[1]} but landmarks in R^{L.shape[1]}")
    nbL = int(L.shape[0])
    if k is None:
        k = int(W.shape[1]) + 1
    if k < 0:
        raise InvalidArgumentError(f"row length must be non-negative, got {k}")
    if k > nbL:
        warnings.warn(f"requested {k} nearest landmarks but only {nbL} exist; rows are truncated")
        k = nbL
    if W.shape[0] == 0 or k == 0:
        return [[] for _ in range(W.shape[0])]

    D = cdist(W, L, metric="sqeuclidean" if squared else "euclidean")
    return [_bounded_top_k(D[i], k) for i in range(W.shape[0])]


def rows_from_table(
    table: Sequence[Sequence[int]],
    distances: Optional[Sequence[Sequence[float]]] = None,
) -> List[NearestLandmarkRow]:
    """Turn a plain landmark-id matrix into rows.

    Without distances the rank inside the row stands in for the distance, which
    keeps the ordering contract for tables that are already sorted.
    """
    rows: List[NearestLandmarkRow] = []
    for i, ids in enumerate(table):
        if distances is None:
            rows.append([(int(l), float(r)) for r, l in enumerate(ids)])
        else:
            if len(distances[i]) != len(ids):
                raise MalformedInputError(f"row {i}: {len(ids)} landmarks but {len(distances[i])} distances")
            rows.append([(int(l), float(d)) for l, d in zip(ids, distances[i])])
    return rows


def validate_rows(rows: Sequence[NearestLandmarkRow], nbL: int) -> None:
    """Bounds-check rows against the landmark set.

    Raises MalformedInputError on an id outside [0, nbL), a repeated landmark
    within a row, or distances that decrease along a row.
    """
    for i, row in enumerate(rows):
        seen = set()
        prev = -np.inf
        for landmark_id, d in row:
            if not 0 <= landmark_id < nbL:
                raise MalformedInputError(f"witness {i}: landmark id {landmark_id} outside [0, {nbL})")
            if landmark_id in seen:
                raise MalformedInputError(f"witness {i}: landmark {landmark_id} appears twice")
            if d < prev:
                raise MalformedInputError(f"witness {i}: distances are not sorted ({d} after {prev})")
            seen.add(landmark_id)
            prev = d


# =============================================================================
# Lazy provider
# =============================================================================

class IncrementalNearestLandmarks:
    """Pull-based, never-rewinding stream of `(landmark_id, squared_distance)`.

    The tree is queried for the k nearest landmarks with k doubling on demand.
    Only entries strictly closer than the k-th distance are released from a
    batch (unless the batch covers all landmarks), so ties that straddle a
    batch boundary still come out in id order.
    """

    def __init__(self, tree: cKDTree, point: NDArray[np.float64], batch_size: int = 4):
        self._tree = tree
        self._point = point
        self._n = int(tree.n)
        self._k = 0
        self._next_k = max(1, int(batch_size))
        self._released = 0
        self._buffer: List[LandmarkDistance] = []
        self._pos = 0

    def _refill(self) -> None:
        while self._pos >= len(self._buffer) and self._k < self._n:
            self._k = min(self._n, self._next_k)
            self._next_k *= 2
            _, idx = self._tree.query(self._point, k=self._k)
            idx = np.atleast_1d(idx)
            # exact squared distances; squaring the tree's euclidean output is off by an ulp
            d = squared_distances_to(self._tree.data[idx], self._point)
            order = np.lexsort((idx, d))
            d, idx = d[order], idx[order]
            if self._k < self._n:
                keep = d < d[-1]
                d, idx = d[keep], idx[keep]
            self._buffer = [(int(l), float(x)) for l, x in zip(idx[self._released:], d[self._released:])]
            self._pos = 0

    def peek(self) -> Optional[LandmarkDistance]:
        """Next pair without consuming it; None once exhausted."""
        self._refill()
        if self._pos < len(self._buffer):
            return self._buffer[self._pos]
        return None

    def next(self) -> Optional[LandmarkDistance]:
        """Consume and return the next pair; None once exhausted."""
        item = self.peek()
        if item is not None:
            self._pos += 1
            self._released += 1
        return item

    @property
    def consumed(self) -> int:
        return self._released

    def __iter__(self) -> Iterator[LandmarkDistance]:
        return self

    def __next__(self) -> LandmarkDistance:
        item = self.next()
        if item is None:
            raise StopIteration
        return item


class LandmarkIndex:
    """Spatial index over the landmarks, answering incremental queries."""

    def __init__(self, landmarks: ArrayLike, batch_size: int = 4):
        self.landmarks = as_point_array(landmarks, "landmarks")
        self.batch_size = int(batch_size)
        self._tree = cKDTree(self.landmarks) if self.landmarks.shape[0] else None

    def __len__(self) -> int:
        return int(self.landmarks.shape[0])

    def query_incremental(self, point: ArrayLike) -> IncrementalNearestLandmarks:
        p = np.asarray(point, dtype=np.float64).ravel()
        if self._tree is None:
            raise InvalidArgumentError("landmark index is empty")
        if p.shape[0] != self.landmarks.shape[1]:
            raise InvalidArgumentError(f"query point lives in R^{p.shape[0]}, landmarks in R^{self.landmarks.shape[1]}")
        return IncrementalNearestLandmarks(self._tree, p, batch_size=self.batch_size)
