"""witness_complex.schema

Lightweight data-model definitions used across the package.

We keep results as plain TypedDicts / dicts so that:
- they are JSON-serialisable with minimal fuss (see `io.py`)
- the library stays friendly to notebooks/scripts

The construction vocabulary:
- landmarks are the vertices of the complex, numbered 0..nbL-1
- witnesses are the data points that justify simplices
- a nearest-landmark row lists a witness's landmarks by ascending distance
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, TypedDict

import numpy as np
from numpy.typing import NDArray


# ---------------------------------------------------------------------------
# Simplices and nearest-landmark rows
# ---------------------------------------------------------------------------

Simplex = Tuple[int, ...]

# (landmark_id, distance)
LandmarkDistance = Tuple[int, float]

# Strictly ascending by distance, ties broken by landmark id.
NearestLandmarkRow = List[LandmarkDistance]


# ---------------------------------------------------------------------------
# Landmark selection
# ---------------------------------------------------------------------------

class FurthestPointResult(TypedDict):
    """Output of `landmarks.choose_landmarks_furthest`."""
    landmarks: List[int]                     # landmark id -> index into the point set
    nearest_table: List[List[int]]           # point -> landmark ids, ascending distance
    nearest_distances: List[List[float]]     # point -> matching distances
    dist_to_L: NDArray[np.float64]           # point -> distance to the landmark set


# ---------------------------------------------------------------------------
# Pipeline output
# ---------------------------------------------------------------------------

class WitnessComplexResult(TypedDict, total=False):
    """A built witness complex plus provenance."""
    variant: str
    num_witnesses: int
    num_landmarks: int
    landmarks: List[int]                     # indices into the witness set (when selected from it)
    landmark_points: NDArray[np.float64]     # landmark id -> coordinates
    store: Any                               # store.SimplexTreeStore
    num_simplices: int
    dimension: int
    simplices_per_dimension: Dict[int, int]
    active_history: List[int]                # weak only
    config: Dict[str, Any]
    library_versions: Dict[str, str]
    notes: Optional[str]


Config = Dict[str, Any]
