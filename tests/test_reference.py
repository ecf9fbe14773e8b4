from __future__ import annotations

import random

import numpy as np
import pytest

from running_median.filter import EmptyFilterError, InvalidWindowSize, MedianFilter
from running_median.reference import NaiveMedianFilter, lower_median


def test_lower_median():
    assert lower_median([]) is None
    assert lower_median([3]) == 3
    assert lower_median([4, 1]) == 1
    assert lower_median([5, 1, 3]) == 3
    assert lower_median([8, 2, 6, 4]) == 4


def test_naive_filter_contract():
    with pytest.raises(InvalidWindowSize):
        NaiveMedianFilter(0)
    f = NaiveMedianFilter(3)
    with pytest.raises(EmptyFilterError):
        f.median()
    assert [f.consume(v) for v in [10, 20, 30, 100]] == [10, 10, 20, 30]
    assert f.min() == 20 and f.max() == 100 and len(f) == 3


@pytest.mark.parametrize("size", list(range(1, 13)) + [16, 31, 64])
@pytest.mark.parametrize("spread", [3, 1000])
def test_matches_reference(size, spread):
    rng = random.Random(size * 7919 + spread)
    fast = MedianFilter(size)
    slow = NaiveMedianFilter(size)
    for i in range(4 * size + 50):
        v = rng.randint(-spread, spread)
        assert fast.consume(v) == slow.consume(v), f"step {i}"
        assert fast.median() == slow.median()
        assert fast.min() == slow.min()
        assert fast.max() == slow.max()
        assert fast.min() <= fast.median() <= fast.max()
        assert list(fast) == slow.sorted()
        assert fast.window() == list(slow.data)
        assert fast.latest() == v
        assert fast.count == min(i + 1, size)


@pytest.mark.parametrize("size", [2, 5, 8])
def test_matches_reference_on_floats(size):
    rng = np.random.default_rng(size)
    data = rng.normal(size=200).round(1).tolist()
    fast = MedianFilter(size)
    slow = NaiveMedianFilter(size)
    assert [fast.consume(v) for v in data] == [slow.consume(v) for v in data]


@pytest.mark.parametrize("size", [1, 4, 7])
def test_window_boundary(size):
    f = MedianFilter(size)
    f.consume(10 ** 9)
    for v in range(size):
        f.consume(v)
    assert f.max() == size - 1
    assert 10 ** 9 not in list(f)


@pytest.mark.parametrize("size", [1, 2, 5, 6])
def test_constant_stream(size):
    f = MedianFilter(size)
    for _ in range(3 * size):
        assert f.consume(7) == 7
    assert f.min() == f.median() == f.max() == 7
