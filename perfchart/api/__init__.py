# Performance Chart - API Package
"""
FastAPI route handlers for the web API.

Routers:
- performance: Aligned performance data and chart image endpoints
- tickers: Ticker listing and visibility toggles
"""

from . import performance
from . import tickers

__all__ = [
    "performance",
    "tickers",
]
