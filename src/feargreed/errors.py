"""Exception types raised by feargreed.

All three concrete errors are terminal for the view that hits them: the page
shows the message with a manual Retry, nothing retries internally.
"""

from __future__ import annotations


class FearGreedError(Exception):
    """Base class for feargreed errors."""


class DataLoadError(FearGreedError):
    """The dataset could not be fetched or parsed (missing file, network, bad CSV)."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class EmptyInputError(FearGreedError, ValueError):
    """Box statistics were requested for a zero-length group."""


class NoDataError(FearGreedError):
    """No valid records remain, or none match a recognized classification."""
