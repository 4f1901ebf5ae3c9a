"""witness_complex.diagnostics

Sanity checks on a built complex.

- `check_closure`: every simplex has all its facets (should always be empty).
- link checks: whether the link of a vertex looks like a triangulated sphere
  at the combinatorial level, i.e. the star is pure and the link is a
  pseudomanifold (each (d-1)-simplex of the link has exactly two d-cofaces
  in the link).
- `complex_is_pseudomanifold`: the same condition on the whole complex.

These are the usual quick tests for whether a witness complex on a sampled
manifold has come out as a manifold triangulation.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Set

from .errors import InvalidArgumentError
from .schema import Simplex
from .store import SimplexTreeStore
from .utils import facets_of


def check_closure(store: SimplexTreeStore) -> List[Simplex]:
    """Simplices with at least one facet missing from the complex."""
    present: Set[Simplex] = {s for s, _ in store.simplices()}
    return [s for s in sorted(present) if any(f not in present for f in facets_of(s))]


def star_vertices(store: SimplexTreeStore, v: int) -> List[int]:
    """`v` followed by its neighbours in the 1-skeleton."""
    neighbours = sorted(u for s, _ in store.simplices(dimension=1) if v in s for u in s if u != v)
    return [v] + neighbours


def link_simplices(store: SimplexTreeStore, v: int) -> Set[Simplex]:
    """Faces opposite to `v` in the simplices of its star."""
    return {tuple(u for u in s if u != v) for s, _ in store.simplices() if v in s and len(s) > 1}


def link_dimension(store: SimplexTreeStore, v: int) -> int:
    """Dimension of the link of `v`; -1 for an isolated vertex."""
    return max((len(s) - 1 for s in link_simplices(store, v)), default=-1)


def _maximal(simplices: Set[Simplex]) -> List[Simplex]:
    faces: Set[Simplex] = set()
    for s in simplices:
        faces.update(facets_of(s))
    return [s for s in simplices if s not in faces]


def star_is_pure(store: SimplexTreeStore, v: int) -> bool:
    """All maximal simplices of the star of `v` have the same dimension."""
    maximal = _maximal(link_simplices(store, v))
    return len({len(s) for s in maximal}) <= 1


def _degree_two(top: Set[Simplex], dimension: int) -> bool:
    """Every (dimension-1)-face of `top` lies in exactly two of its simplices."""
    counts: Counter = Counter()
    for s in top:
        if dimension == 0:
            counts[()] += 1
        else:
            counts.update(facets_of(s))
    return bool(counts) and all(c == 2 for c in counts.values())


def link_is_pseudomanifold(store: SimplexTreeStore, v: int, dimension: int) -> bool:
    """The `dimension`-simplices of the link of `v` form a pseudomanifold.

    For dimension 0 this means the link is exactly two points.
    """
    if dimension < 0:
        return False
    top = {s for s in link_simplices(store, v) if len(s) == dimension + 1}
    return _degree_two(top, dimension)


def has_good_link(store: SimplexTreeStore, v: int) -> bool:
    """Pure star and pseudomanifold link."""
    d = link_dimension(store, v)
    return d != -1 and star_is_pure(store, v) and link_is_pseudomanifold(store, v, d)


def complex_is_pseudomanifold(store: SimplexTreeStore, dimension: int) -> bool:
    """Every (dimension-1)-simplex of the complex has exactly two `dimension`-cofaces."""
    if dimension < 1:
        raise InvalidArgumentError(f"pseudomanifold dimension must be >= 1, got {dimension}")
    top = {s for s, _ in store.simplices(dimension=dimension)}
    if not top:
        return False
    counts: Counter = Counter()
    for s in top:
        counts.update(facets_of(s))
    ridges = [s for s, _ in store.simplices(dimension=dimension - 1)]
    return all(counts.get(r, 0) == 2 for r in ridges)


def link_report(store: SimplexTreeStore) -> Dict[str, Dict[int, int]]:
    """Good / bad link counts, keyed by link dimension.

    Isolated vertices are counted under "bad" with key -1.
    """
    good: Dict[int, int] = {}
    bad: Dict[int, int] = {}
    for v in store.vertices():
        d = link_dimension(store, v)
        bucket = good if has_good_link(store, v) else bad
        bucket[d] = bucket.get(d, 0) + 1
    return {"good": dict(sorted(good.items())), "bad": dict(sorted(bad.items()))}
