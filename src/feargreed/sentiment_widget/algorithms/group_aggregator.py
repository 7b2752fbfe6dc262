"""
Per-classification grouping for the distribution (box plot) view.

Steps:
1. Partition records by classification label.
2. Walk the categories in the fixed order; skip categories with no records.
3. Run compute_box_stats() on each group's values.
4. Return the summaries in that order (and optionally as a stats table).
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, fields
from typing import Any, Sequence

import pandas as pd

from feargreed.errors import NoDataError
from feargreed.sentiment_widget.algorithms.box_stats import BOX_STATS_COLUMNS, BoxStats, compute_box_stats
from feargreed.sentiment_widget.categories import CATEGORY_ORDER, Category
from feargreed.sentiment_widget.dataset import Record
from feargreed.utils.logging import get_logger

logger = get_logger(__name__)

SUMMARY_TABLE_COLUMNS = ["category"] + BOX_STATS_COLUMNS + ["n_outliers"]


@dataclass(frozen=True)
class GroupSummary:
    """Box statistics for one category plus the data they were computed from.

    values keeps the original record order (not sorted) so strip points keep
    their identity; raw_data holds the records themselves for the detail view.
    """
    category: Category
    values: tuple[float, ...]
    raw_data: tuple[Record, ...]
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

    @classmethod
    def from_stats(
        cls,
        category: Category,
        values: Sequence[float],
        raw_data: Sequence[Record],
        stats: BoxStats,
    ) -> "GroupSummary":
        own = {f.name for f in fields(cls)} - {"category", "values", "raw_data"}
        return cls(
            category=category,
            values=tuple(values),
            raw_data=tuple(raw_data),
            **{name: getattr(stats, name) for name in own},
        )

    def to_dict(self) -> dict[str, Any]:
        """Row for the stats table (category label + scalar stats)."""
        d: dict[str, Any] = {"category": self.category.value}
        for col in BOX_STATS_COLUMNS:
            d[col] = getattr(self, col)
        d["n_outliers"] = len(self.outliers)
        return d


def aggregate(
    records: Sequence[Record],
    order: Sequence[Category] = CATEGORY_ORDER,
) -> tuple[GroupSummary, ...]:
    """
    Group records by classification and compute box stats per group.

    Args:
        records: Loaded records (any order).
        order: Category order for the output. Categories with no records are
            omitted; records whose label is not in order are ignored.

    Returns:
        Tuple of GroupSummary in the given order.

    Raises:
        NoDataError: If records is empty or no record matches a category in order.
    """
    if not records:
        raise NoDataError("No records to aggregate")

    by_label: dict[str, list[Record]] = defaultdict(list)
    for r in records:
        by_label[r.classification].append(r)

    summaries: list[GroupSummary] = []
    for category in order:
        group = by_label.get(category.value)
        if not group:
            continue
        values = [r.value for r in group]
        stats = compute_box_stats(values)
        summaries.append(GroupSummary.from_stats(category, values, group, stats))

    if not summaries:
        labels = sorted(by_label)
        raise NoDataError(f"No record matches a recognized classification (found labels: {labels})")

    known = {c.value for c in order}
    n_ignored = sum(len(rs) for label, rs in by_label.items() if label not in known)
    if n_ignored:
        logger.info("Ignored %s record(s) with unrecognized classification", n_ignored)
    logger.debug(
        "Aggregated %s records into %s group(s): %s",
        len(records),
        len(summaries),
        [(s.category.value, s.count) for s in summaries],
    )
    return tuple(summaries)


def summary_for(summaries: Sequence[GroupSummary], category: Category) -> GroupSummary | None:
    """Return the summary for category, or None if that category is not present."""
    for s in summaries:
        if s.category == category:
            return s
    return None


def summary_table(summaries: Sequence[GroupSummary]) -> pd.DataFrame:
    """Stats table with one row per summary, columns SUMMARY_TABLE_COLUMNS."""
    if not summaries:
        return pd.DataFrame(columns=SUMMARY_TABLE_COLUMNS)
    return pd.DataFrame([s.to_dict() for s in summaries], columns=SUMMARY_TABLE_COLUMNS)
