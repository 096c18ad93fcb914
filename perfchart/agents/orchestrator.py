"""
Refresh orchestration.

The orchestrator fans out one fetch per configured ticker, turns every
outcome into a tagged result, and merges whatever succeeded. The
coordinator wraps it with superseding semantics: starting a refresh cancels
the one still in flight, and only the current refresh may publish results.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..config import DEFAULT_RANGE, TICKERS, VALID_RANGES
from ..errors import AllSourcesFailedError
from ..models import AlignedRow, NormalizedPoint, TickerConfig, TickerVisibility
from .series_aligner import SeriesAligner
from .series_fetcher import SeriesFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one ticker's fetch: points on success, error otherwise."""
    symbol: str
    points: List[NormalizedPoint] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.points)


@dataclass
class RefreshResult:
    """Aligned rows plus the tickers that contributed nothing."""
    range: str
    rows: List[AlignedRow]
    failures: Dict[str, str] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=datetime.now)


class PerformanceOrchestrator:
    """Fetches every configured ticker concurrently and aligns the results."""

    def __init__(self, fetcher: SeriesFetcher,
                 tickers: Sequence[TickerConfig] = TICKERS,
                 aligner: Optional[SeriesAligner] = None):
        self.fetcher = fetcher
        self.tickers = tuple(tickers)
        self.aligner = aligner or SeriesAligner()

    async def _fetch_outcome(self, symbol: str, range: str) -> FetchOutcome:
        try:
            points = await self.fetcher.fetch(symbol, range)
        except Exception as e:
            # Some fund symbols are routinely refused by the provider
            logger.warning(f"Skipping {symbol}: {e}")
            return FetchOutcome(symbol=symbol, error=str(e) or type(e).__name__)
        return FetchOutcome(symbol=symbol, points=points)

    async def refresh_detailed(self, range: str) -> RefreshResult:
        """
        Fetch all tickers and merge the ones that returned data.

        Raises AllSourcesFailedError when no ticker produced any points.
        """
        if range not in VALID_RANGES:
            raise ValueError(f"Unsupported range: {range}")

        logger.info(f"Refreshing {len(self.tickers)} tickers for range {range}")

        outcomes = await asyncio.gather(
            *[self._fetch_outcome(t.symbol, range) for t in self.tickers]
        )

        failures = {o.symbol: o.error or "empty series" for o in outcomes if not o.ok}
        usable = [(o.symbol, o.points) for o in outcomes if o.ok]
        if not usable:
            raise AllSourcesFailedError(failures)

        rows = self.aligner.merge(usable)
        logger.info(
            f"Refresh for {range} complete: {len(usable)}/{len(outcomes)} tickers, "
            f"{len(rows)} rows"
        )
        return RefreshResult(range=range, rows=rows, failures=failures)

    async def refresh(self, range: str) -> List[AlignedRow]:
        """Fetch all tickers and return only the aligned rows."""
        result = await self.refresh_detailed(range)
        return result.rows


class RefreshCoordinator:
    """
    Single-slot register for the in-flight refresh.

    Also holds what the dashboard shows: the selected range, the
    per-ticker visibility switches, and the latest successful result.
    """

    def __init__(self, orchestrator: PerformanceOrchestrator,
                 default_range: str = DEFAULT_RANGE):
        self.orchestrator = orchestrator
        self.range = default_range
        self.enabled: Dict[str, bool] = {t.symbol: True for t in orchestrator.tickers}
        self.latest: Optional[RefreshResult] = None
        self.last_error: Optional[str] = None
        self._inflight: Optional[asyncio.Task] = None

    @property
    def tickers(self) -> List[TickerVisibility]:
        return [
            TickerVisibility(symbol=t.symbol, display_name=t.display_name,
                             enabled=self.enabled[t.symbol])
            for t in self.orchestrator.tickers
        ]

    def set_enabled(self, symbol: str, enabled: bool) -> None:
        symbol = symbol.strip().upper()
        if symbol not in self.enabled:
            raise KeyError(symbol)
        self.enabled[symbol] = enabled

    def cancel(self) -> None:
        """Cancel the in-flight refresh, if any."""
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

    async def aclose(self) -> None:
        """Cancel the in-flight refresh and wait for its fetches to unwind."""
        task = self._inflight
        if task is None:
            return
        self.cancel()
        # Only the refresh's own CancelledError is absorbed here
        await asyncio.gather(task, return_exceptions=True)
        if self._inflight is task:
            self._inflight = None

    async def refresh(self, range: Optional[str] = None) -> Optional[RefreshResult]:
        """
        Refresh for a range, superseding any refresh still running.

        Returns None when this call was superseded by a newer one. Raises
        AllSourcesFailedError if this call is current and every ticker failed.
        """
        range = range or self.range
        if range not in VALID_RANGES:
            raise ValueError(f"Unsupported range: {range}")

        self.cancel()
        self.range = range
        task = asyncio.create_task(self.orchestrator.refresh_detailed(range))
        self._inflight = task

        try:
            result = await task
        except asyncio.CancelledError:
            if self._inflight is not task:
                logger.info(f"Refresh for {range} superseded")
                return None
            raise
        except AllSourcesFailedError as e:
            if self._inflight is task:
                self.last_error = str(e)
                self._inflight = None
                logger.error(f"Refresh for {range} failed: {e}")
                raise
            return None

        if self._inflight is not task:
            logger.info(f"Discarding superseded result for {range}")
            return None

        self._inflight = None
        self.latest = result
        self.last_error = None
        return result
