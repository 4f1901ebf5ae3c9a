"""witness_complex.landmarks

Landmark selection.

Two strategies are provided:

- furthest-point sampling: start from a reproducible pick and repeatedly take
  the point furthest from the landmarks chosen so far. As a side effect every
  point accumulates its landmarks sorted by distance, which is exactly the
  nearest-landmark table the weak engine consumes.
- random sampling: `nbL` distinct indices drawn without replacement.

Both are deterministic for a given seed.
"""

from __future__ import annotations

from typing import List, Optional, Union

import numpy as np
from numpy.typing import ArrayLike
from scipy.spatial.distance import cdist

from .errors import InvalidArgumentError
from .schema import FurthestPointResult
from .utils import as_point_array


def _check_count(nbL: int, nbP: int) -> None:
    if nbL < 0:
        raise InvalidArgumentError(f"number of landmarks must be non-negative, got {nbL}")
    if nbL > nbP:
        raise InvalidArgumentError(f"cannot choose {nbL} landmarks among {nbP} points")


def choose_landmarks_furthest(
    points: ArrayLike,
    nbL: int,
    *,
    first: Optional[int] = None,
    seed: int = 0,
) -> FurthestPointResult:
    """Furthest-point landmark selection.

    Parameters
    ----------
    points:
        (N, D) point set; it doubles as the witness set.
    nbL:
        Number of landmarks to choose.
    first:
        Index of the first landmark. When omitted it is drawn from `seed`.
    seed:
        Seed for the first pick only; the rest of the procedure is deterministic.

    Returns
    -------
    FurthestPointResult with the chosen indices (landmark id -> point index),
    and for each point its landmark ids and distances in ascending order.
    """
    W = as_point_array(points)
    nbP = int(W.shape[0])
    _check_count(nbL, nbP)

    dist_to_L = np.full(nbP, np.inf)
    landmarks: List[int] = []
    table: List[List[int]] = [[] for _ in range(nbP)]
    dists: List[List[float]] = [[] for _ in range(nbP)]
    if nbL == 0:
        return {"landmarks": landmarks, "nearest_table": table, "nearest_distances": dists, "dist_to_L": dist_to_L}

    if first is None:
        curr_max_w = int(np.random.default_rng(seed).integers(nbP))
    else:
        if not 0 <= int(first) < nbP:
            raise InvalidArgumentError(f"first landmark {first} is outside [0, {nbP})")
        curr_max_w = int(first)

    for landmark_id in range(nbL):
        landmarks.append(curr_max_w)
        new_dist = cdist(W, W[curr_max_w][None, :]).ravel()
        for i in range(nbP):
            d = float(new_dist[i])
            row_ids, row_d = table[i], dists[i]
            row_ids.append(landmark_id)
            row_d.append(d)
            # insertion sort: only the new element moves
            j = len(row_d) - 1
            while j > 0 and row_d[j - 1] > row_d[j]:
                row_d[j - 1], row_d[j] = row_d[j], row_d[j - 1]
                row_ids[j - 1], row_ids[j] = row_ids[j], row_ids[j - 1]
                j -= 1
        np.minimum(dist_to_L, new_dist, out=dist_to_L)
        # chosen points are excluded so duplicated coordinates cannot be picked twice
        candidates = dist_to_L.copy()
        candidates[landmarks] = -np.inf
        # argmax returns the first occurrence on ties
        curr_max_w = int(np.argmax(candidates))

    return {"landmarks": landmarks, "nearest_table": table, "nearest_distances": dists, "dist_to_L": dist_to_L}


def choose_landmarks_random(points: Union[ArrayLike, int], nbL: int, *, seed: int = 0) -> List[int]:
    """Draw `nbL` distinct point indices uniformly, without replacement.

    Partial Fisher-Yates shuffle: only the first `nbL` slots are shuffled, so
    the cost is O(nbP + nbL) and the loop always terminates.

    `points` may be the point set itself or just its size.
    """
    if isinstance(points, (int, np.integer)):
        nbP = int(points)
    else:
        nbP = int(as_point_array(points).shape[0])
    _check_count(nbL, nbP)

    rng = np.random.default_rng(seed)
    pool = np.arange(nbP)
    for i in range(nbL):
        j = int(rng.integers(i, nbP))
        pool[i], pool[j] = pool[j], pool[i]
    return sorted(int(x) for x in pool[:nbL])


def choose_landmarks(points: ArrayLike, nbL: int, *, strategy: str = "furthest", seed: int = 0, first: Optional[int] = None) -> List[int]:
    """Dispatch on `strategy` ("furthest" | "random") and return point indices."""
    strategy = str(strategy).lower()
    if strategy == "furthest":
        return choose_landmarks_furthest(points, nbL, first=first, seed=seed)["landmarks"]
    if strategy == "random":
        return choose_landmarks_random(points, nbL, seed=seed)
    raise InvalidArgumentError(f"Unknown landmark strategy: {strategy}")
