import numpy as np
import pytest

from witness_complex.errors import InvalidArgumentError
from witness_complex.landmarks import choose_landmarks, choose_landmarks_furthest, choose_landmarks_random


def _make_pc(n=40, d=3, seed=0):
    rng = np.random.default_rng(seed)
    return rng.normal(size=(n, d))


def test_furthest_second_landmark_is_farthest_point():
    res = choose_landmarks_furthest(np.arange(6, dtype=float), 2, first=0)
    assert res["landmarks"] == [0, 5]
    # every point sees both landmarks, nearest first
    assert res["nearest_table"][0] == [0, 1]
    assert res["nearest_table"][5] == [1, 0]
    assert res["nearest_distances"][2] == [2.0, 3.0]
    assert np.allclose(res["dist_to_L"], [0, 1, 2, 2, 1, 0])


def test_furthest_rows_are_sorted_and_complete():
    X = _make_pc()
    res = choose_landmarks_furthest(X, 10, seed=3)
    assert len(set(res["landmarks"])) == 10
    for ids, dists in zip(res["nearest_table"], res["nearest_distances"]):
        assert sorted(ids) == list(range(10))
        assert dists == sorted(dists)


def test_furthest_is_reproducible():
    X = _make_pc()
    a = choose_landmarks_furthest(X, 8, seed=11)["landmarks"]
    b = choose_landmarks_furthest(X, 8, seed=11)["landmarks"]
    assert a == b


def test_furthest_distinct_even_with_duplicated_points():
    X = np.zeros((4, 2))
    res = choose_landmarks_furthest(X, 4, first=2)
    assert sorted(res["landmarks"]) == [0, 1, 2, 3]
    assert res["landmarks"][0] == 2


def test_furthest_zero_landmarks():
    res = choose_landmarks_furthest(_make_pc(), 0)
    assert res["landmarks"] == []
    assert all(ids == [] for ids in res["nearest_table"])


def test_furthest_too_many_landmarks():
    with pytest.raises(InvalidArgumentError):
        choose_landmarks_furthest(np.arange(3, dtype=float), 4)
    with pytest.raises(InvalidArgumentError):
        choose_landmarks_furthest(np.arange(3, dtype=float), 1, first=7)


def test_random_landmarks_are_distinct_and_seeded():
    sel = choose_landmarks_random(100, 30, seed=5)
    assert len(sel) == 30
    assert len(set(sel)) == 30
    assert all(0 <= i < 100 for i in sel)
    assert sel == choose_landmarks_random(100, 30, seed=5)


def test_random_landmarks_can_take_every_point():
    X = _make_pc(n=12)
    assert choose_landmarks_random(X, 12, seed=1) == list(range(12))


def test_random_landmarks_too_many():
    with pytest.raises(InvalidArgumentError):
        choose_landmarks_random(5, 6)


def test_choose_landmarks_dispatch():
    X = _make_pc()
    assert choose_landmarks(X, 5, strategy="random", seed=2) == choose_landmarks_random(X, 5, seed=2)
    with pytest.raises(InvalidArgumentError):
        choose_landmarks(X, 5, strategy="density")
