"""witness_complex.store

Complex store used by the construction engines.

The engines only talk to a small protocol (`ComplexStore`): insert with or
without faces, find, boundary. The concrete store wraps a
`gudhi.SimplexTree`, which already guarantees closure when simplices are
inserted with their faces.

Simplices are handed around as sorted tuples of landmark ids; a "handle" is
simply that tuple.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

import threading

import gudhi

from .errors import InvalidStateError
from .schema import Simplex
from .utils import facets_of


class ComplexStore(Protocol):
    def insert_simplex(self, vertices: Sequence[int], filtration: float = 0.0) -> Tuple[Simplex, bool]: ...
    def insert_simplex_and_subfaces(self, vertices: Sequence[int], filtration: float = 0.0) -> bool: ...
    def find(self, vertices: Sequence[int]) -> Optional[Simplex]: ...
    def boundary_simplex_range(self, simplex: Sequence[int]) -> List[Simplex]: ...
    def num_vertices(self) -> int: ...
    def set_dimension(self, dimension: int) -> None: ...


def _key(vertices: Iterable[int]) -> Simplex:
    return tuple(sorted(int(v) for v in vertices))


class SimplexTreeStore:
    """`ComplexStore` backed by a `gudhi.SimplexTree`.

    Writes go through a lock, so concurrent `insert_simplex_and_subfaces`
    calls for the same simplex are safe and the second one reports
    "already present".
    """

    def __init__(self, simplex_tree: Optional[gudhi.SimplexTree] = None):
        self.simplex_tree = simplex_tree if simplex_tree is not None else gudhi.SimplexTree()
        self._dimension: Optional[int] = None
        self._lock = threading.Lock()

    # --- insertion ---------------------------------------------------------

    def insert_simplex(self, vertices: Sequence[int], filtration: float = 0.0) -> Tuple[Simplex, bool]:
        """Insert a single simplex whose facets must already be present."""
        simplex = _key(vertices)
        with self._lock:
            if self.simplex_tree.find(list(simplex)):
                return simplex, False
            missing = [f for f in facets_of(simplex) if not self.simplex_tree.find(list(f))]
            if missing:
                raise InvalidStateError(f"cannot insert {simplex}: facets {missing} are not in the complex")
            inserted = self.simplex_tree.insert(list(simplex), filtration=float(filtration))
        return simplex, bool(inserted)

    def insert_simplex_and_subfaces(self, vertices: Sequence[int], filtration: float = 0.0) -> bool:
        """Insert a simplex with all its missing faces.

        Returns False if the simplex was already present. Faces already in the
        complex with a higher filtration value are lowered to `filtration`.
        """
        simplex = _key(vertices)
        with self._lock:
            return bool(self.simplex_tree.insert(list(simplex), filtration=float(filtration)))

    # --- queries -----------------------------------------------------------

    def find(self, vertices: Sequence[int]) -> Optional[Simplex]:
        simplex = _key(vertices)
        if simplex and self.simplex_tree.find(list(simplex)):
            return simplex
        return None

    def filtration(self, vertices: Sequence[int]) -> float:
        return float(self.simplex_tree.filtration(list(_key(vertices))))

    def boundary_simplex_range(self, simplex: Sequence[int]) -> List[Simplex]:
        return [_key(face) for face, _ in self.simplex_tree.get_boundaries(list(_key(simplex)))]

    def num_vertices(self) -> int:
        return int(self.simplex_tree.num_vertices())

    def num_simplices(self) -> int:
        return int(self.simplex_tree.num_simplices())

    def vertices(self) -> List[int]:
        return sorted(s[0] for s, _ in self.simplex_tree.get_skeleton(0))

    def simplices(self, dimension: Optional[int] = None) -> List[Tuple[Simplex, float]]:
        """All `(simplex, filtration)` pairs, sorted by dimension then vertices."""
        out = [(_key(s), float(f)) for s, f in self.simplex_tree.get_simplices()]
        if dimension is not None:
            out = [(s, f) for s, f in out if len(s) == dimension + 1]
        out.sort(key=lambda sf: (len(sf[0]), sf[0]))
        return out

    def simplices_per_dimension(self) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for s, _ in self.simplex_tree.get_simplices():
            counts[len(s) - 1] = counts.get(len(s) - 1, 0) + 1
        return dict(sorted(counts.items()))

    # --- dimension ---------------------------------------------------------

    def set_dimension(self, dimension: int) -> None:
        """Record the dimension reached by the construction."""
        self._dimension = int(dimension)

    def dimension(self) -> int:
        if self._dimension is not None:
            return self._dimension
        return int(self.simplex_tree.dimension())

    def __len__(self) -> int:
        return self.num_simplices()

    def __contains__(self, vertices: Sequence[int]) -> bool:
        return self.find(vertices) is not None
