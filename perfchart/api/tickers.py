"""
Ticker API endpoints.

Lists the configured tickers and toggles their chart visibility.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..agents import RefreshCoordinator
from ..models import TickerVisibility, VisibilityUpdate
from .performance import get_coordinator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[TickerVisibility])
async def get_tickers(coordinator: RefreshCoordinator = Depends(get_coordinator)):
    """Get all configured tickers with their visibility."""
    return coordinator.tickers


@router.put("/{symbol}", response_model=TickerVisibility)
async def set_ticker_visibility(
    symbol: str,
    update: VisibilityUpdate,
    coordinator: RefreshCoordinator = Depends(get_coordinator),
):
    """Show or hide a ticker on the chart."""
    symbol = symbol.strip().upper()

    try:
        coordinator.set_enabled(symbol, update.enabled)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"{symbol} is not a configured ticker")

    logger.info(f"{symbol} {'shown' if update.enabled else 'hidden'}")
    return next(t for t in coordinator.tickers if t.symbol == symbol)
