"""
Box plot statistics algorithm (Tukey fences, nearest-rank quartiles).

Quartiles are picked by index, not interpolated:

    sorted = sort(values)              # ascending, stable
    q1     = sorted[floor(n * 0.25)]
    median = sorted[floor(n * 0.50)]
    q3     = sorted[floor(n * 0.75)]

This differs from numpy.percentile / pandas.quantile (linear interpolation)
and is kept on purpose: switching methods changes which points are outliers.
For n < 4 the quartiles may collapse onto the same value; that is expected.

Fences and whiskers:

    iqr           = q3 - q1
    lower_fence   = q1 - 1.5 * iqr
    upper_fence   = q3 + 1.5 * iqr
    outliers      = values strictly outside [lower_fence, upper_fence]
    whisker_lower = smallest value >= lower_fence  (else min)
    whisker_upper = largest value  <= upper_fence  (else max)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from feargreed.errors import EmptyInputError

# Multiplier on the IQR for the Tukey fences.
FENCE_FACTOR = 1.5

# Summary columns, in display order.
BOX_STATS_COLUMNS = [
    "count", "min", "q1", "median", "q3", "max", "iqr",
    "lower_fence", "upper_fence", "whisker_lower", "whisker_upper",
]


@dataclass(frozen=True)
class BoxStats:
    """Five-number summary plus fences, whiskers and outliers for one group."""
    count: int
    min: float
    q1: float
    median: float
    q3: float
    max: float
    iqr: float
    lower_fence: float
    upper_fence: float
    whisker_lower: float
    whisker_upper: float
    outliers: tuple[float, ...]
    sorted_values: tuple[float, ...]


def _nearest_rank(sorted_values: np.ndarray, p: float) -> float:
    idx = int(math.floor(len(sorted_values) * p))
    return float(sorted_values[idx])


def compute_box_stats(values: Iterable[float]) -> BoxStats:
    """
    Compute box plot statistics for a numeric sequence.

    Args:
        values: Non-empty sequence of finite numbers, in any order.

    Returns:
        BoxStats. A pure function of the multiset of values: reordering the
        input gives an identical result.

    Raises:
        EmptyInputError: If values is empty.
        ValueError: If any value is NaN or infinite.
    """
    arr = np.asarray(list(values), dtype=float)
    n = len(arr)
    if n == 0:
        raise EmptyInputError("compute_box_stats() requires at least one value")
    if not np.all(np.isfinite(arr)):
        raise ValueError("compute_box_stats() requires finite values (got NaN or inf)")

    s = np.sort(arr, kind="stable")

    q1 = _nearest_rank(s, 0.25)
    median = _nearest_rank(s, 0.5)
    q3 = _nearest_rank(s, 0.75)
    min_ = float(s[0])
    max_ = float(s[-1])

    iqr = q3 - q1
    lower_fence = q1 - FENCE_FACTOR * iqr
    upper_fence = q3 + FENCE_FACTOR * iqr

    outlier_mask = (s < lower_fence) | (s > upper_fence)
    inside = s[~outlier_mask]

    # s is sorted, so the in-fence values are a contiguous run
    whisker_lower = float(inside[0]) if len(inside) else min_
    whisker_upper = float(inside[-1]) if len(inside) else max_

    return BoxStats(
        count=n,
        min=min_,
        q1=q1,
        median=median,
        q3=q3,
        max=max_,
        iqr=iqr,
        lower_fence=lower_fence,
        upper_fence=upper_fence,
        whisker_lower=whisker_lower,
        whisker_upper=whisker_upper,
        outliers=tuple(float(v) for v in s[outlier_mask]),
        sorted_values=tuple(float(v) for v in s),
    )
