"""Fear & Greed dashboard widget: box statistics, selection state and Plotly figures for NiceGUI."""

from feargreed.sentiment_widget.dashboard_config import DashboardConfig
from feargreed.sentiment_widget.dashboard_controller import SentimentDashboardController

__all__ = [
    "DashboardConfig",
    "SentimentDashboardController",
]
