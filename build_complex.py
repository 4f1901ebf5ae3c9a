#!/usr/bin/env python3
"""
Witness Complex Builder
=======================

Point the POINTS_FILE below at a whitespace-separated text file with one point
per line (or leave it as None to use a noisy circle), then run:
    python build_complex.py

Shows the simplex counts per dimension and the link diagnostics.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import numpy as np

# =============================================================================
# INPUT
# =============================================================================

POINTS_FILE = None        # e.g. "data/torus.txt"

# =============================================================================
# CONFIGURATION (adjust if needed)
# =============================================================================

CONFIG = {
    "variant": "weak",            # "weak" or "strong"
    "landmark_strategy": "furthest",
    "nb_landmarks": 40,
    "max_alpha_square": 0.02,     # strong only
    "limit_dimension": 2,         # strong only
}

OUTPUT_JSON = None        # e.g. "out/complex.json"

# =============================================================================
# ANALYSIS (no need to edit below)
# =============================================================================

def _load_points():
    if POINTS_FILE is None:
        rng = np.random.default_rng(0)
        t = rng.uniform(0.0, 2 * np.pi, size=500)
        return np.stack([np.cos(t), np.sin(t)], axis=1) + rng.normal(scale=0.02, size=(500, 2))
    return np.loadtxt(POINTS_FILE, ndmin=2)


def main():
    from witness_complex import build_witness_complex, default_config, save_result
    from witness_complex.diagnostics import check_closure, link_report

    print("=" * 70)
    print("WITNESS COMPLEX")
    print("=" * 70)

    config = default_config()
    config.update(CONFIG)
    points = _load_points()

    print(f"\nConfig: variant={config['variant']}, landmarks={config['nb_landmarks']} "
          f"({config['landmark_strategy']})")
    print()

    result = build_witness_complex(points, config=config, verbose=True)
    store = result["store"]

    print()
    print("=" * 70)
    print("DIAGNOSTICS")
    print("=" * 70)
    missing = check_closure(store)
    print(f"  closure:   {'ok' if not missing else f'{len(missing)} simplices with missing facets'}")
    report = link_report(store)
    for label in ("good", "bad"):
        counts = report[label]
        if counts:
            detail = ", ".join(f"dim {d}: {n}" for d, n in counts.items())
        else:
            detail = "none"
        print(f"  {label} links: {detail}")

    if OUTPUT_JSON:
        path = save_result(result, OUTPUT_JSON)
        print(f"\nSaved to {path}")


if __name__ == "__main__":
    main()
