"""Classification conventions for the Fear & Greed dataset.

Single source of truth for the category labels, their fixed axis order and
their colors, so the loader, aggregator and figure generator stay consistent.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Category(Enum):
    """Fear & Greed classification. Values are the labels used in the CSV."""
    EXTREME_FEAR = "Extreme Fear"
    FEAR = "Fear"
    NEUTRAL = "Neutral"
    GREED = "Greed"
    EXTREME_GREED = "Extreme Greed"

    @classmethod
    def from_label(cls, label: object) -> Optional["Category"]:
        """Return the category for a label, or None if the label is unrecognized.

        Matching ignores surrounding whitespace and case.
        """
        if label is None:
            return None
        key = str(label).strip().lower()
        return _LABEL_LOOKUP.get(key)


# Axis order: every group iteration follows this.
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.EXTREME_FEAR,
    Category.FEAR,
    Category.NEUTRAL,
    Category.GREED,
    Category.EXTREME_GREED,
)

CATEGORY_COLORS: dict[Category, str] = {
    Category.EXTREME_FEAR: "#8B0000",
    Category.FEAR: "#FF6B6B",
    Category.NEUTRAL: "#FFD93D",
    Category.GREED: "#6BCF7F",
    Category.EXTREME_GREED: "#00A86B",
}

# Fallback for labels outside the enumeration (timeline bars only).
UNKNOWN_CATEGORY_COLOR = "#999999"

_LABEL_LOOKUP: dict[str, Category] = {c.value.lower(): c for c in Category}


def color_for_label(label: str) -> str:
    """Color for a classification label; gray for unrecognized labels."""
    category = Category.from_label(label)
    if category is None:
        return UNKNOWN_CATEGORY_COLOR
    return CATEGORY_COLORS[category]
