"""witness_complex.weak

Weak witness complex by iterative deepening.

Every landmark is a vertex. Each witness first witnesses the edge between its
two nearest landmarks. Then, dimension by dimension, a witness whose row is
R proposes the simplex {R[0], ..., R[k]}; it is inserted when all its facets
are already in the complex, and otherwise the witness is dropped for good.

Rows are sorted by distance, so a facet that is missing at dimension k stays
missing for every longer prefix of the same row: dropping the witness loses
nothing, and the set of active witnesses shrinks quickly in practice.

All simplices get filtration 0.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .active import ActiveWitnessTracker, row_source
from .errors import InvalidArgumentError, InvalidStateError
from .nearest import validate_rows
from .schema import NearestLandmarkRow, Simplex
from .store import ComplexStore
from .utils import as_point_array, facets_of


def all_faces_in(store: ComplexStore, simplex: Sequence[int]) -> bool:
    """True when every facet of `simplex` is already in the complex."""
    for facet in facets_of(simplex):
        if store.find(facet) is None:
            return False
    return True


class WeakWitnessComplex:
    """Weak witness complex on `nbL` landmarks, built from nearest-landmark rows.

    Parameters
    ----------
    nbL:
        Number of landmarks; vertices are 0..nbL-1.
    density:
        Reserved. Stored for provenance, not used by the construction.
    landmark_points:
        Optional (nbL, D) coordinates, for `get_point`.
    """

    def __init__(self, nbL: int, density: Optional[float] = None, landmark_points: Optional[ArrayLike] = None):
        if nbL < 0:
            raise InvalidArgumentError(f"number of landmarks must be non-negative, got {nbL}")
        self.nbL = int(nbL)
        self.density = density
        self.landmark_points: Optional[NDArray[np.float64]] = None
        if landmark_points is not None:
            self.landmark_points = as_point_array(landmark_points, "landmark_points")
            if self.landmark_points.shape[0] != self.nbL:
                raise InvalidArgumentError(f"{self.landmark_points.shape[0]} landmark points given for nbL={self.nbL}")
        self.active_history: List[int] = []
        self.inserted_per_dimension: Dict[int, int] = {}

    def set_nb_landmarks(self, nbL: int) -> None:
        if nbL < 0:
            raise InvalidArgumentError(f"number of landmarks must be non-negative, got {nbL}")
        self.nbL = int(nbL)

    def set_density(self, density: float) -> None:
        self.density = density

    def get_point(self, vertex: int) -> NDArray[np.float64]:
        """Coordinates of landmark `vertex`."""
        if self.landmark_points is None:
            raise InvalidStateError("no landmark coordinates were given")
        return self.landmark_points[vertex]

    def create_complex(
        self,
        store: ComplexStore,
        rows: Sequence[NearestLandmarkRow],
        *,
        verbose: bool = False,
    ) -> bool:
        """Fill `store` with the weak witness complex.

        Parameters
        ----------
        store:
            Empty complex store.
        rows:
            One nearest-landmark row per witness, ascending by distance.
        verbose:
            Print the number of active witnesses per dimension.

        Returns
        -------
        True once the construction has terminated.
        """
        if store.num_vertices() > 0:
            raise InvalidStateError("weak witness complex cannot create complex - complex is not empty")
        validate_rows(rows, self.nbL)

        self.active_history = []
        self.inserted_per_dimension = {}

        for v in range(self.nbL):
            store.insert_simplex((v,), 0.0)
        self.inserted_per_dimension[0] = self.nbL

        tracker = ActiveWitnessTracker(row_source(list(rows)))
        if self.nbL > 1:
            count = 0
            short = 0
            for w, row in enumerate(rows):
                if len(row) < 2:
                    short += 1
                    continue
                _, inserted = store.insert_simplex((row[0][0], row[1][0]), 0.0)
                count += int(inserted)
                tracker.add(w, consumed=2)
            if short:
                warnings.warn(f"{short} witnesses see fewer than two landmarks and witness no edge")
            self.inserted_per_dimension[1] = count
        tracker.checkpoint()
        if verbose:
            print(f"[witness_complex] k=1, active witnesses: {len(tracker)}")

        D = max((len(row) for row in rows), default=0)
        top = 1 if self.inserted_per_dimension.get(1) else 0
        k = 2
        while tracker and k < D:
            count = 0
            for aw in tracker:
                if aw.exhausted:
                    tracker.prune(aw.witness_id)
                    continue
                row = rows[aw.witness_id]
                simplex: Simplex = tuple(row[i][0] for i in range(k + 1))
                if all_faces_in(store, simplex):
                    _, inserted = store.insert_simplex(simplex, 0.0)
                    count += int(inserted)
                    tracker.advance(aw.witness_id)
                else:
                    tracker.prune(aw.witness_id)
            tracker.checkpoint()
            self.inserted_per_dimension[k] = count
            if count:
                top = k
            if verbose:
                print(f"[witness_complex] k={k}, active witnesses: {len(tracker)}, new simplices: {count}")
            k += 1

        self.active_history = list(tracker.history)
        store.set_dimension(top if self.nbL else -1)
        return True
