"""witness_complex.utils

Small utilities used throughout the codebase.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .errors import InvalidArgumentError


def as_point_array(points: ArrayLike, name: str = "points") -> NDArray[np.float64]:
    """Coerce a point range into a read-only (N, D) float array.

    A 1-D input is read as N points on the real line.
    """
    arr = np.array(points, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise InvalidArgumentError(f"{name} must be an (N, D) array, got shape {arr.shape}")
    if arr.size and not np.all(np.isfinite(arr)):
        raise InvalidArgumentError(f"{name} contains non-finite coordinates")
    arr.setflags(write=False)
    return arr


def squared_distances_to(points: NDArray[np.float64], target: NDArray[np.float64]) -> NDArray[np.float64]:
    """Squared euclidean distance from every row of `points` to `target`."""
    diff = points - target[None, :]
    return np.einsum("ij,ij->i", diff, diff)


def combinations_of(items: Sequence[int], size: int) -> Iterator[Tuple[int, ...]]:
    """Yield every `size`-subset of `items`, in lexicographic order of positions.

    Index-based (combinadic) generation: the state is the array of chosen
    positions, advanced in place, so depth does not grow with `size`.
    """
    n = len(items)
    if size < 0 or size > n:
        return
    idx = list(range(size))
    while True:
        yield tuple(items[i] for i in idx)
        # rightmost position that can still move right
        i = size - 1
        while i >= 0 and idx[i] == i + n - size:
            i -= 1
        if i < 0:
            return
        idx[i] += 1
        for j in range(i + 1, size):
            idx[j] = idx[j - 1] + 1


def facets_of(simplex: Sequence[int]) -> List[Tuple[int, ...]]:
    """Codimension-1 faces, obtained by deleting one vertex at a time."""
    verts = tuple(simplex)
    if len(verts) < 2:
        return []
    return [verts[:i] + verts[i + 1:] for i in range(len(verts))]


def to_jsonable(obj: Any) -> Any:
    """Recursively convert numpy types into JSON-friendly python types."""
    if isinstance(obj, (str, int, float, bool)) or obj is None:
        return obj
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, (np.integer,)):
        return int(obj)
    # fall back to string
    return str(obj)
