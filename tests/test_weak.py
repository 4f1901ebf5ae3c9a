import numpy as np
import pytest

from witness_complex.diagnostics import check_closure
from witness_complex.errors import InvalidArgumentError, InvalidStateError, MalformedInputError
from witness_complex.landmarks import choose_landmarks_furthest
from witness_complex.nearest import nearest_landmark_table
from witness_complex.store import SimplexTreeStore
from witness_complex.weak import WeakWitnessComplex


TRIANGLE = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])


def _build(witnesses, landmarks):
    store = SimplexTreeStore()
    rows = nearest_landmark_table(witnesses, landmarks)
    engine = WeakWitnessComplex(len(landmarks), landmark_points=landmarks)
    assert engine.create_complex(store, rows)
    return store, engine


def test_landmarks_as_witnesses_only_see_their_nearest_edges():
    # each corner witnesses the edge to its nearest other corner; nobody sees {1, 2}
    store, engine = _build(TRIANGLE, TRIANGLE)
    simplices = {s for s, _ in store.simplices()}
    assert simplices == {(0,), (1,), (2,), (0, 1), (0, 2)}
    assert engine.active_history == [3, 0]


def test_full_triangle_once_every_edge_is_witnessed():
    W = np.vstack([TRIANGLE, [[0.55, 0.55]]])
    store, engine = _build(W, TRIANGLE)
    simplices = store.simplices()
    assert [s for s, _ in simplices] == [(0,), (1,), (2,), (0, 1), (0, 2), (1, 2), (0, 1, 2)]
    assert all(f == 0.0 for _, f in simplices)
    assert store.dimension() == 2
    assert engine.inserted_per_dimension[2] == 1


def test_all_landmarks_present_and_closure_holds():
    rng = np.random.default_rng(0)
    X = rng.uniform(size=(300, 2))
    fp = choose_landmarks_furthest(X, 25, first=0)
    L = X[fp["landmarks"]]
    store, engine = _build(X, L)
    assert store.vertices() == list(range(25))
    assert check_closure(store) == []
    history = engine.active_history
    assert all(a >= b for a, b in zip(history, history[1:]))


def test_pruning_is_monotone_in_higher_dimension():
    rng = np.random.default_rng(4)
    X = rng.normal(size=(200, 3))
    L = X[:30]
    store = SimplexTreeStore()
    rows = nearest_landmark_table(X, L, k=6)
    engine = WeakWitnessComplex(30)
    engine.create_complex(store, rows)
    history = engine.active_history
    assert history[0] == 200
    assert all(a >= b for a, b in zip(history, history[1:]))
    assert len(history) <= 5
    assert check_closure(store) == []


def test_complex_must_start_empty():
    store = SimplexTreeStore()
    store.insert_simplex_and_subfaces([0])
    with pytest.raises(InvalidStateError):
        WeakWitnessComplex(3).create_complex(store, nearest_landmark_table(TRIANGLE, TRIANGLE))


def test_rows_referencing_unknown_landmarks_are_rejected():
    with pytest.raises(MalformedInputError):
        WeakWitnessComplex(3).create_complex(SimplexTreeStore(), [[(0, 0.0), (5, 1.0)]])


def test_single_landmark_gives_a_vertex():
    store = SimplexTreeStore()
    WeakWitnessComplex(1).create_complex(store, [[(0, 0.3)], [(0, 0.1)]])
    assert store.simplices() == [((0,), 0.0)]


def test_witnesses_with_one_landmark_are_reported():
    store = SimplexTreeStore()
    rows = [[(0, 0.1), (1, 0.4)], [(1, 0.2)], [(0, 0.3)]]
    with pytest.warns(UserWarning, match="2 witnesses see fewer than two landmarks"):
        WeakWitnessComplex(2).create_complex(store, rows)
    assert store.simplices() == [((0,), 0.0), ((1,), 0.0), ((0, 1), 0.0)]


def test_density_is_kept_but_unused():
    engine = WeakWitnessComplex(2, density=0.5)
    engine.set_density(0.25)
    engine.set_nb_landmarks(3)
    assert engine.density == 0.25
    assert engine.nbL == 3
    store = SimplexTreeStore()
    engine.create_complex(store, nearest_landmark_table(TRIANGLE, TRIANGLE))
    assert store.num_simplices() == 5
    with pytest.raises(InvalidArgumentError):
        engine.set_nb_landmarks(-1)


def test_get_point():
    _, engine = _build(TRIANGLE, TRIANGLE)
    assert np.array_equal(engine.get_point(2), [0.0, 1.0])
    with pytest.raises(InvalidStateError):
        WeakWitnessComplex(3).get_point(0)
