"""witness_complex.analysis

High-level entry points:
- build_witness_complex: landmarks -> nearest landmarks -> engine -> simplex tree
- print_complex_summary: a short textual summary of the result

This is the "make it run" module intended for scripts and examples.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike

from .config import default_config, get_library_versions, set_global_seeds
from .errors import InvalidArgumentError
from .landmarks import choose_landmarks_furthest, choose_landmarks_random
from .nearest import nearest_landmark_table, rows_from_table
from .schema import WitnessComplexResult
from .store import SimplexTreeStore
from .strong import StrongWitnessComplex
from .utils import as_point_array
from .weak import WeakWitnessComplex


def build_witness_complex(
    points: ArrayLike,
    *,
    config: Optional[Dict[str, Any]] = None,
    landmarks: Optional[Sequence[int]] = None,
    landmark_points: Optional[ArrayLike] = None,
    verbose: bool = False,
) -> WitnessComplexResult:
    """Build a weak or strong witness complex on a point cloud.

    Parameters
    ----------
    points:
        (N, D) point cloud; every point is a witness.
    config:
        Overrides for `default_config()`.
    landmarks:
        Optional explicit landmark indices into `points`. When given, no
        selection strategy runs.
    landmark_points:
        Optional independent (nbL, D) landmark coordinates. Mutually exclusive
        with `landmarks`.
    verbose:
        Print basic progress.

    Returns
    -------
    result dict with keys:
        variant, store, landmarks, landmark_points, num_simplices, dimension, ...
    """
    cfg = default_config()
    if config:
        cfg.update(config)

    seed = int(cfg.get("random_seed", 0))
    set_global_seeds(seed)

    W = as_point_array(points, "points")
    variant = str(cfg.get("variant", "weak")).lower()
    if variant not in ("weak", "strong"):
        raise InvalidArgumentError(f"Unknown witness complex variant: {variant}")
    if landmarks is not None and landmark_points is not None:
        raise InvalidArgumentError("give either landmark indices or landmark points, not both")

    landmark_ids: Optional[list] = None
    rows = None
    if landmark_points is not None:
        L = as_point_array(landmark_points, "landmark_points")
    else:
        if landmarks is not None:
            landmark_ids = [int(i) for i in landmarks]
            if any(not 0 <= i < W.shape[0] for i in landmark_ids):
                raise InvalidArgumentError("landmark indices must lie in [0, number of points)")
        else:
            nbL = int(cfg.get("nb_landmarks", 32))
            strategy = str(cfg.get("landmark_strategy", "furthest")).lower()
            if strategy == "furthest":
                fp = choose_landmarks_furthest(W, nbL, first=cfg.get("first_landmark"), seed=seed)
                landmark_ids = fp["landmarks"]
                k = cfg.get("nearest_k")
                k = W.shape[1] + 1 if k is None else int(k)
                # the selection already sorted every point's landmarks
                table = [ids[:k] for ids in fp["nearest_table"]]
                dists = [d[:k] for d in fp["nearest_distances"]]
                rows = rows_from_table(table, dists)
            elif strategy == "random":
                landmark_ids = choose_landmarks_random(W, nbL, seed=seed)
            else:
                raise InvalidArgumentError(f"Unknown landmark strategy: {strategy}")
        L = W[landmark_ids] if landmark_ids else np.empty((0, W.shape[1]))

    nbL = int(L.shape[0])
    if verbose:
        print(f"[witness_complex] {variant}: {W.shape[0]} witnesses, {nbL} landmarks")

    store = SimplexTreeStore()
    result: WitnessComplexResult = {
        "variant": variant,
        "num_witnesses": int(W.shape[0]),
        "num_landmarks": nbL,
        "landmarks": landmark_ids if landmark_ids is not None else [],
        "landmark_points": L,
        "config": cfg,
        "library_versions": get_library_versions(),
    }

    if variant == "weak":
        engine = WeakWitnessComplex(nbL, density=cfg.get("density"), landmark_points=L)
        if rows is None:
            rows = nearest_landmark_table(W, L, cfg.get("nearest_k"))
        engine.create_complex(store, rows, verbose=verbose)
        result["active_history"] = list(engine.active_history)
    else:
        engine = StrongWitnessComplex(L, W)
        engine.create_complex(
            store,
            float(cfg.get("max_alpha_square", 0.0)),
            cfg.get("limit_dimension"),
            n_jobs=int(cfg.get("n_jobs", 1)),
            verbose=verbose,
        )

    result["store"] = store
    result["num_simplices"] = store.num_simplices()
    result["dimension"] = store.dimension()
    result["simplices_per_dimension"] = store.simplices_per_dimension()

    if verbose:
        print_complex_summary(result)
    return result


def print_complex_summary(result: Dict[str, Any]) -> None:
    """Pretty-print a lightweight summary."""
    per_dim = result.get("simplices_per_dimension", {})
    print(f"Witness complex ({result.get('variant')})")
    print(f"  witnesses:  {result.get('num_witnesses')}")
    print(f"  landmarks:  {result.get('num_landmarks')}")
    print(f"  simplices:  {result.get('num_simplices')}  (dimension {result.get('dimension')})")
    for d, n in sorted(per_dim.items()):
        print(f"    dim {d}: {n}")
    history = result.get("active_history")
    if history:
        print(f"  active witnesses per dimension: {history}")
