"""
Performance Chart Agents.

- SeriesFetcher: fetches and normalizes one ticker's monthly series
- SeriesAligner: outer-joins normalized series by month
- PerformanceOrchestrator: concurrent fetch of all tickers with failure tolerance
- RefreshCoordinator: superseding refreshes and dashboard state
"""

from .series_fetcher import (
    SeriesFetcher,
    format_month,
    resolve_timezone,
    normalize_points,
    parse_chart_payload,
)
from .series_aligner import SeriesAligner, merge_series
from .orchestrator import (
    FetchOutcome,
    PerformanceOrchestrator,
    RefreshCoordinator,
    RefreshResult,
)

__all__ = [
    "SeriesFetcher",
    "format_month",
    "resolve_timezone",
    "normalize_points",
    "parse_chart_payload",
    "SeriesAligner",
    "merge_series",
    "FetchOutcome",
    "PerformanceOrchestrator",
    "RefreshCoordinator",
    "RefreshResult",
]
