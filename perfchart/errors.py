"""
Exceptions raised by the performance pipeline.

Per-ticker failures derive from SeriesFetchError and are downgraded to
"no data" by the orchestrator. Only AllSourcesFailedError reaches callers.
Cancellation is asyncio.CancelledError and is never wrapped.
"""

from typing import Dict, Optional


class PerformanceError(Exception):
    """Base class for all performance pipeline errors."""


class SeriesFetchError(PerformanceError):
    """A single ticker could not produce a series."""

    def __init__(self, ticker: str, message: str):
        super().__init__(message)
        self.ticker = ticker


class NetworkError(SeriesFetchError):
    """Transport-level failure talking to the chart provider."""


class ProviderError(SeriesFetchError):
    """Provider answered with a bad status or an unusable payload."""

    def __init__(self, ticker: str, message: str, status_code: Optional[int] = None):
        super().__init__(ticker, message)
        self.status_code = status_code


class DataIntegrityError(ProviderError):
    """Provider returned a zero or negative close price."""


class EmptySeriesError(SeriesFetchError):
    """Payload parsed but no usable price points survived filtering."""


class AllSourcesFailedError(PerformanceError):
    """Every configured ticker failed to produce data."""

    def __init__(self, failures: Dict[str, str]):
        self.failures = dict(failures)
        super().__init__(
            "Could not load data for any ticker "
            f"({', '.join(sorted(self.failures)) or 'no tickers configured'})"
        )
