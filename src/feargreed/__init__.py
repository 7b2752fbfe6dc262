"""
feargreed: interactive Fear & Greed Index charts for NiceGUI.

This package provides:
- Box plot statistics (nearest-rank quartiles, Tukey fences) per classification
- A selection state machine for the distribution view's drill-down strip plot
- Plotly figures for the timeline, price vs sentiment and distribution views
- SentimentDashboardController and a standalone app (feargreed.sentiment_app)

For logging configuration in standalone scripts:
    ```python
    from feargreed.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from feargreed.utils.logging import configure_logging, get_logger

from feargreed.errors import DataLoadError, EmptyInputError, FearGreedError, NoDataError

# NullHandler so logs don't reach root when no application configured logging.
_logger = logging.getLogger("feargreed")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "DataLoadError",
    "EmptyInputError",
    "FearGreedError",
    "NoDataError",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
