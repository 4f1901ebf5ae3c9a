"""Weak witness complex on a noisy circle.

Furthest-point landmarks, D+1 nearest landmarks per witness, iterative
deepening with pruning.

Run:
    python examples/circle_weak.py
"""

import numpy as np

from witness_complex import build_witness_complex, default_config, print_complex_summary
from witness_complex.diagnostics import link_report


def main() -> None:
    rng = np.random.default_rng(0)
    t = rng.uniform(0.0, 2 * np.pi, size=400)
    X = np.stack([np.cos(t), np.sin(t)], axis=1) + rng.normal(scale=0.02, size=(400, 2))

    cfg = default_config()
    cfg["nb_landmarks"] = 24
    cfg["first_landmark"] = 0

    result = build_witness_complex(X, config=cfg, verbose=True)

    print("\n" + "=" * 72)
    print_complex_summary(result)

    # on a well-sampled circle most vertices should have a two-point link
    print("\nLink report:", link_report(result["store"]))


if __name__ == "__main__":
    main()
