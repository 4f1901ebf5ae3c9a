"""Strong witness complex on a torus in R^3, capped at dimension 2.

Run:
    python examples/torus_strong.py
"""

import numpy as np

from witness_complex import StrongWitnessComplex, SimplexTreeStore, choose_landmarks_furthest


def _torus(n: int, R: float = 2.0, r: float = 0.7, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    u, v = rng.uniform(0.0, 2 * np.pi, size=(2, n))
    return np.stack([(R + r * np.cos(v)) * np.cos(u), (R + r * np.cos(v)) * np.sin(u), r * np.sin(v)], axis=1)


def main() -> None:
    X = _torus(3000)
    landmarks = choose_landmarks_furthest(X, 150, seed=0)["landmarks"]

    swc = StrongWitnessComplex(X[landmarks], X)
    store = SimplexTreeStore()
    swc.create_complex(store, max_alpha_square=0.05, limit_dimension=2, n_jobs=4, verbose=True)

    print(f"simplices per dimension: {store.simplices_per_dimension()}")
    print(f"landmark 0 sits at {swc.get_point(0)}")

    # persistence of the filtered complex, computed downstream by gudhi itself
    st = store.simplex_tree
    st.compute_persistence()
    print(f"Betti numbers: {st.betti_numbers()}")


if __name__ == "__main__":
    main()
