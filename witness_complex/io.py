"""witness_complex.io

JSON (de)serialisation helpers for complexes.

The outputs of this library are plain dicts + lists around a simplex tree. We
provide helpers to:
- flatten a complex store into JSON-friendly simplices
- save a pipeline result to disk with provenance metadata intact
- dump the simplex tree in nested-parenthesis form, e.g. "(0(1(2),2),1(2),2)"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping

import json

from .store import SimplexTreeStore
from .utils import to_jsonable


def complex_to_dict(store: SimplexTreeStore) -> Dict[str, Any]:
    """Simplices and filtration values as plain lists."""
    simplices = store.simplices()
    return {
        "num_vertices": store.num_vertices(),
        "num_simplices": len(simplices),
        "dimension": store.dimension(),
        "simplices": [list(s) for s, _ in simplices],
        "filtrations": [f for _, f in simplices],
    }


def complex_from_dict(data: Mapping[str, Any]) -> SimplexTreeStore:
    """Rebuild a store from `complex_to_dict` output."""
    store = SimplexTreeStore()
    for s, f in zip(data["simplices"], data["filtrations"]):
        store.insert_simplex_and_subfaces(s, f)
    if "dimension" in data:
        store.set_dimension(int(data["dimension"]))
    return store


def result_to_json(result: Mapping[str, Any], indent: int = 2) -> str:
    """Convert a pipeline result (see `analysis.build_witness_complex`) to JSON.

    The store is replaced by its `complex_to_dict` form.
    """
    payload = dict(result)
    store = payload.pop("store", None)
    if store is not None:
        payload["complex"] = complex_to_dict(store)
    return json.dumps(to_jsonable(payload), indent=indent, ensure_ascii=False)


def save_result(result: Mapping[str, Any], path: str | Path, indent: int = 2) -> Path:
    """Save a pipeline result to JSON on disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result_to_json(result, indent=indent), encoding="utf-8")
    return path


def complex_to_nested_string(store: SimplexTreeStore) -> str:
    """Nested-parenthesis rendering of the simplex tree.

    Each vertex is followed by the subtree of simplices that extend it with
    larger vertices.
    """
    children: Dict[tuple, List[int]] = {}
    for s, _ in store.simplices():
        children.setdefault(s[:-1], []).append(s[-1])

    def _render(prefix: tuple) -> str:
        parts: List[str] = []
        for v in sorted(children.get(prefix, [])):
            sub = prefix + (v,)
            parts.append(f"{v}{_render(sub)}" if sub in children else str(v))
        return "(" + ",".join(parts) + ")"

    return _render(())
