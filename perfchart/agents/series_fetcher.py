"""
Series Fetcher Agent.

Fetches monthly closing prices for one ticker from the Yahoo chart API and
rescales them so the first available month equals 100.
"""

import math
import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from ..config import INTERVAL, USER_AGENT, VALID_RANGES, DEFAULT_PROVIDER_URL
from ..errors import (
    DataIntegrityError,
    EmptySeriesError,
    NetworkError,
    ProviderError,
)
from ..models import NormalizedPoint, RawPricePoint

logger = logging.getLogger(__name__)

CHART_PATH = "/v8/finance/chart/{ticker}"


def parse_chart_payload(payload: Any, ticker: str) -> Tuple[List[RawPricePoint], Optional[str]]:
    """
    Extract raw price points from a chart API payload.

    Returns the points (close may be None) and the exchange timezone name
    from the result meta, if any. Raises ProviderError when the payload does not have the
    expected shape.
    """
    if not isinstance(payload, dict):
        raise ProviderError(ticker, f"Unexpected payload for {ticker}")

    chart = payload.get("chart")
    if not isinstance(chart, dict):
        raise ProviderError(ticker, f"No chart object for {ticker}")

    results = chart.get("result")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        error = chart.get("error")
        detail = ""
        if isinstance(error, dict) and error.get("description"):
            detail = f": {error['description']}"
        raise ProviderError(ticker, f"No data for {ticker}{detail}")

    result = results[0]
    meta = result.get("meta") or {}
    tz_name = meta.get("exchangeTimezoneName") if isinstance(meta, dict) else None
    if not isinstance(tz_name, str) or not tz_name:
        tz_name = None

    timestamps = result.get("timestamp")
    if timestamps is None:
        # Provider omits timestamps when the range has no trading data
        return [], tz_name

    try:
        closes = result["indicators"]["quote"][0]["close"]
    except (KeyError, IndexError, TypeError):
        raise ProviderError(ticker, f"Missing close prices for {ticker}")

    if not isinstance(timestamps, list) or not isinstance(closes, list):
        raise ProviderError(ticker, f"Malformed price arrays for {ticker}")
    if len(timestamps) != len(closes):
        raise ProviderError(
            ticker,
            f"Timestamp/close length mismatch for {ticker}: "
            f"{len(timestamps)} != {len(closes)}"
        )

    points = []
    for ts, close in zip(timestamps, closes):
        if isinstance(close, bool) or not isinstance(close, (int, float, type(None))):
            raise ProviderError(ticker, f"Non-numeric close for {ticker}: {close!r}")
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            raise ProviderError(ticker, f"Non-numeric timestamp for {ticker}: {ts!r}")
        points.append(RawPricePoint(timestamp=int(ts), close=close))

    return points, tz_name


def resolve_timezone(tz_name: Optional[str]) -> tzinfo:
    """Look up an exchange timezone, falling back to UTC when unknown."""
    if not tz_name:
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown exchange timezone {tz_name!r}, labelling in UTC")
        return timezone.utc


def format_month(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """
    Format epoch seconds as a zero-padded YYYY-MM label.

    The offset in effect at that instant is used, so bars stamped at local
    midnight keep their month on both sides of a DST change.
    """
    moment = datetime.fromtimestamp(timestamp, tz=tz or timezone.utc)
    return moment.strftime("%Y-%m")


def normalize_points(points: List[RawPricePoint], ticker: str,
                     tz_name: Optional[str] = None) -> List[NormalizedPoint]:
    """
    Rescale closes so the first valid month equals 100.

    Points with a missing or NaN close are dropped, survivors are sorted by
    timestamp, and points falling in the same month collapse to the latest.
    The base is the close of the earliest remaining month, so when that
    month held several bars it is the latest of them rather than the very
    first valid close.
    """
    valid = [
        p for p in points
        if p.close is not None and not math.isnan(p.close)
    ]
    if not valid:
        raise EmptySeriesError(ticker, f"Empty series for {ticker}")

    for p in valid:
        if p.close <= 0:
            raise DataIntegrityError(
                ticker, f"Non-positive close {p.close} for {ticker} at {p.timestamp}"
            )

    tz = resolve_timezone(tz_name)
    by_month: Dict[str, float] = {}
    for p in sorted(valid, key=lambda p: p.timestamp):
        by_month[format_month(p.timestamp, tz)] = p.close

    base = next(iter(by_month.values()))
    return [
        NormalizedPoint(date_label=label, value=(close / base) * 100)
        for label, close in by_month.items()
    ]


class SeriesFetcher:
    """
    Fetches and normalizes monthly price series.

    The HTTP client is shared across fetches and owned by the caller.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str = DEFAULT_PROVIDER_URL):
        self.client = client
        self.base_url = base_url.rstrip("/")

    def build_url(self, ticker: str) -> str:
        return f"{self.base_url}{CHART_PATH.format(ticker=ticker)}"

    async def fetch_raw(self, ticker: str, range: str) -> Dict[str, Any]:
        """Request the chart payload for a ticker."""
        try:
            resp = await self.client.get(
                self.build_url(ticker),
                params={"range": range, "interval": INTERVAL},
                headers={"User-Agent": USER_AGENT},
            )
        except httpx.TransportError as e:
            raise NetworkError(ticker, f"Failed to fetch {ticker}: {e}") from e

        if not resp.is_success:
            raise ProviderError(
                ticker, f"Failed to fetch {ticker}: {resp.status_code}",
                status_code=resp.status_code
            )

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(ticker, f"Invalid JSON for {ticker}") from e

    async def fetch(self, ticker: str, range: str) -> List[NormalizedPoint]:
        """
        Fetch a ticker's normalized monthly series.

        Raises NetworkError, ProviderError or EmptySeriesError. Cancellation
        propagates as asyncio.CancelledError.
        """
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise ValueError("Ticker symbol is required")
        if range not in VALID_RANGES:
            raise ValueError(f"Unsupported range: {range}")

        payload = await self.fetch_raw(ticker, range)
        points, tz_name = parse_chart_payload(payload, ticker)
        series = normalize_points(points, ticker, tz_name)

        logger.debug(f"Fetched {len(series)} monthly points for {ticker} ({range})")
        return series

