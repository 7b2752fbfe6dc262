"""Unit tests for nearest-rank box statistics."""

import numpy as np
import pytest

from feargreed.errors import EmptyInputError
from feargreed.sentiment_widget.algorithms.box_stats import BOX_STATS_COLUMNS, compute_box_stats


def _assert_ordered(s):
    assert s.min <= s.whisker_lower <= s.q1 <= s.median <= s.q3 <= s.whisker_upper <= s.max


def test_ten_values_example():
    """[10..100] -> q1=30, median=60, q3=80 by floor-indexed ranks."""
    s = compute_box_stats([10, 20, 30, 40, 50, 60, 70, 80, 90, 100])
    assert s.count == 10
    assert s.q1 == 30
    assert s.median == 60
    assert s.q3 == 80
    assert s.iqr == 50
    assert s.lower_fence == -45
    assert s.upper_fence == 155
    assert s.outliers == ()
    assert s.whisker_lower == 10
    assert s.whisker_upper == 100
    assert s.min == 10
    assert s.max == 100


def test_quartiles_are_not_interpolated():
    """Nearest-rank differs from numpy's linear percentile on the same data."""
    values = [1, 2, 3, 4, 5, 6, 7, 8]
    s = compute_box_stats(values)
    assert s.q1 == 3  # sorted[2]
    assert s.median == 5  # sorted[4]
    assert s.q3 == 7  # sorted[6]
    assert s.median != np.percentile(values, 50)


def test_outliers_and_whiskers():
    values = [1, 50, 52, 54, 55, 56, 58, 60, 200]
    s = compute_box_stats(values)
    # n=9: q1=sorted[2]=52, median=sorted[4]=55, q3=sorted[6]=58
    assert (s.q1, s.median, s.q3) == (52, 55, 58)
    assert s.iqr == 6
    assert s.lower_fence == 43
    assert s.upper_fence == 67
    assert s.outliers == (1.0, 200.0)
    assert s.whisker_lower == 50
    assert s.whisker_upper == 60
    for v in s.outliers:
        assert v < s.lower_fence or v > s.upper_fence
    _assert_ordered(s)


def test_single_value_collapses():
    s = compute_box_stats([42])
    assert s.min == s.q1 == s.median == s.q3 == s.max == 42
    assert s.iqr == 0
    assert s.outliers == ()
    assert s.whisker_lower == s.whisker_upper == 42


def test_small_n_collapse_is_accepted():
    s = compute_box_stats([5, 1, 3])
    # n=3: indices 0, 1, 2
    assert (s.q1, s.median, s.q3) == (1, 3, 5)
    _assert_ordered(s)


def test_identical_values_have_no_outliers():
    s = compute_box_stats([7, 7, 7, 7, 7])
    assert s.iqr == 0
    assert s.outliers == ()
    _assert_ordered(s)


def test_empty_raises_empty_input_error():
    with pytest.raises(EmptyInputError):
        compute_box_stats([])


def test_empty_input_error_is_value_error():
    with pytest.raises(ValueError):
        compute_box_stats([])


def test_non_finite_raises():
    with pytest.raises(ValueError):
        compute_box_stats([1.0, float("nan"), 3.0])


def test_idempotent_and_order_independent():
    values = [12.5, 3.0, 99.0, 47.0, 47.0, 8.25, 61.0, 15.0, 0.5]
    a = compute_box_stats(values)
    b = compute_box_stats(values)
    c = compute_box_stats(list(reversed(values)))
    assert a == b == c


def test_invariants_hold_on_random_samples():
    rng = np.random.default_rng(1234)
    for n in (1, 2, 3, 4, 5, 11, 50, 333):
        values = rng.normal(50, 25, size=n).tolist() + ([250.0] if n > 4 else [])
        s = compute_box_stats(values)
        _assert_ordered(s)
        assert s.iqr == s.q3 - s.q1
        for v in s.outliers:
            assert v < s.lower_fence or v > s.upper_fence
        inside = [v for v in values if s.lower_fence <= v <= s.upper_fence]
        assert len(inside) + len(s.outliers) == len(values)


def test_stats_columns_are_fields():
    s = compute_box_stats([1, 2, 3, 4])
    for col in BOX_STATS_COLUMNS:
        assert isinstance(getattr(s, col), (int, float))
    assert s.outliers == ()
