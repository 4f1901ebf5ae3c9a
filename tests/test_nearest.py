import numpy as np
import pytest

from witness_complex.errors import MalformedInputError
from witness_complex.nearest import LandmarkIndex, nearest_landmark_table, rows_from_table, validate_rows


def _make_pc(n, d=2, seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=(n, d))


def test_eager_rows_are_ascending():
    W = _make_pc(60, seed=1)
    L = _make_pc(15, seed=2)
    rows = nearest_landmark_table(W, L)
    assert len(rows) == 60
    for w, row in zip(W, rows):
        assert len(row) == 3  # D + 1
        keys = [(d, l) for l, d in row]
        assert all(a < b for a, b in zip(keys, keys[1:]))
        brute = np.argsort(np.linalg.norm(L - w, axis=1), kind="stable")[:3]
        assert [l for l, _ in row] == [int(i) for i in brute]


def test_eager_heap_keeps_the_k_smallest():
    W = np.array([[0.0]])
    L = np.array([[3.0], [1.0], [2.0], [0.5]])
    (row,) = nearest_landmark_table(W, L, k=2)
    assert row == [(3, 0.5), (1, 1.0)]


def test_eager_ties_broken_by_landmark_id():
    W = np.array([[0.0]])
    L = np.array([[1.0], [-1.0], [2.0], [-2.0]])
    (row,) = nearest_landmark_table(W, L, k=4)
    assert [l for l, _ in row] == [0, 1, 2, 3]


def test_eager_row_length_clamped_to_landmark_count():
    W = _make_pc(5, d=3)
    L = _make_pc(2, d=3, seed=4)
    with pytest.warns(UserWarning):
        rows = nearest_landmark_table(W, L)
    assert all(len(row) == 2 for row in rows)


def test_rows_from_table_and_validation():
    rows = rows_from_table([[0, 2, 1], [1, 0, 2]])
    validate_rows(rows, 3)
    with pytest.raises(MalformedInputError):
        validate_rows(rows, 2)
    with pytest.raises(MalformedInputError):
        validate_rows([[(0, 0.0), (0, 1.0)]], 3)
    with pytest.raises(MalformedInputError):
        validate_rows([[(0, 1.0), (1, 0.5)]], 3)
    with pytest.raises(MalformedInputError):
        rows_from_table([[0, 1]], [[0.0]])


def test_lazy_stream_matches_brute_force():
    L = _make_pc(50, seed=7)
    p = np.array([0.1, -0.2])
    index = LandmarkIndex(L, batch_size=1)
    stream = index.query_incremental(p)
    pulled = list(stream)
    d2 = np.sum((L - p) ** 2, axis=1)
    expected = np.lexsort((np.arange(50), d2))
    assert [l for l, _ in pulled] == [int(i) for i in expected]
    assert np.allclose([d for _, d in pulled], d2[expected])
    assert stream.next() is None
    assert stream.peek() is None
    assert stream.consumed == 50


def test_lazy_stream_pulls_monotonically():
    L = np.array([[1.0], [-1.0], [2.0], [-2.0], [3.0]])
    stream = LandmarkIndex(L, batch_size=1).query_incremental([0.0])
    assert stream.peek() == stream.peek()
    first = stream.next()
    second = stream.next()
    assert first[0] == 0 and second[0] == 1
    assert first[1] == pytest.approx(1.0) and second[1] == pytest.approx(1.0)
    rest = [l for l, _ in stream]
    assert rest == [2, 3, 4]


def test_lazy_stream_reports_exact_squared_distances():
    L = np.array([[1.0, 1.0], [2.0, 3.0]])
    stream = LandmarkIndex(L).query_incremental([0.0, 0.0])
    assert list(stream) == [(0, 2.0), (1, 13.0)]
