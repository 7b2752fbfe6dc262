"""Dashboard views (one tab and one figure each)."""

from __future__ import annotations

from enum import Enum


class DashboardView(Enum):
    """Enumeration of available dashboard views."""
    TIMELINE = "timeline"
    PRICE = "price"
    DISTRIBUTION = "distribution"

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    DashboardView.TIMELINE: "Timeline",
    DashboardView.PRICE: "Price vs sentiment",
    DashboardView.DISTRIBUTION: "Distribution",
}
