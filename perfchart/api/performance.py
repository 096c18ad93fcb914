"""
Performance API endpoints.

Provides the aligned, normalized performance table and its chart image.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from ..agents import RefreshCoordinator, RefreshResult
from ..charts.generator import chart_generator
from ..errors import AllSourcesFailedError
from ..models import (
    APIResponse,
    ChartImageResponse,
    ChartRange,
    PerformanceResponse,
    RangeUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)

ALL_FAILED_MESSAGE = (
    "Could not load data for any ticker. The chart provider may be "
    "blocking requests; try again later."
)


def get_coordinator(request: Request) -> RefreshCoordinator:
    """Dependency returning the app-wide refresh coordinator."""
    return request.app.state.coordinator


def _superseded_response() -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content=APIResponse(success=False, data={"cancelled": True}).model_dump()
    )


def _build_response(coordinator: RefreshCoordinator, result: RefreshResult) -> PerformanceResponse:
    return PerformanceResponse(
        range=result.range,
        rows=result.rows,
        tickers=coordinator.tickers,
        failed_tickers=sorted(result.failures),
        generated_at=result.generated_at,
    )


async def _run_refresh(coordinator: RefreshCoordinator, range: str) -> Optional[RefreshResult]:
    try:
        return await coordinator.refresh(range)
    except AllSourcesFailedError:
        raise HTTPException(status_code=503, detail=ALL_FAILED_MESSAGE)
    except Exception as e:
        logger.error(f"Performance refresh failed for {range}: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to refresh performance data: {str(e)}"
        )


@router.get("", response_model=PerformanceResponse)
async def get_performance(
    range: Optional[ChartRange] = Query(default=None),
    coordinator: RefreshCoordinator = Depends(get_coordinator),
):
    """
    Fetch every configured ticker and return the aligned table.

    Uses the currently selected range when none is given.
    """
    result = await _run_refresh(coordinator, range or coordinator.range)
    if result is None:
        return _superseded_response()
    return _build_response(coordinator, result)


@router.put("/range", response_model=PerformanceResponse)
async def select_range(
    update: RangeUpdate,
    coordinator: RefreshCoordinator = Depends(get_coordinator),
):
    """Select a new range and refresh, cancelling any refresh in flight."""
    result = await _run_refresh(coordinator, update.range)
    if result is None:
        return _superseded_response()
    return _build_response(coordinator, result)


@router.get("/latest", response_model=PerformanceResponse)
async def get_latest(coordinator: RefreshCoordinator = Depends(get_coordinator)):
    """Return the last successful refresh without fetching."""
    if coordinator.latest is None:
        raise HTTPException(status_code=404, detail="No performance data loaded yet")
    return _build_response(coordinator, coordinator.latest)


@router.get("/chart-image", response_model=ChartImageResponse)
async def get_chart_image(
    range: Optional[ChartRange] = Query(default=None),
    coordinator: RefreshCoordinator = Depends(get_coordinator),
):
    """Get the performance chart of the enabled tickers as a base64 data URL."""
    range = range or coordinator.range

    result = coordinator.latest
    if result is None or result.range != range:
        result = await _run_refresh(coordinator, range)
        if result is None:
            return _superseded_response()

    try:
        image = chart_generator.generate_performance_chart(
            result.rows,
            coordinator.orchestrator.tickers,
            coordinator.enabled,
            range=range,
        )
    except Exception as e:
        logger.error(f"Error generating performance chart for {range}: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate chart image: {str(e)}"
        )

    return ChartImageResponse(range=range, image=image)


@router.get("/status", response_model=APIResponse)
async def get_status(coordinator: RefreshCoordinator = Depends(get_coordinator)):
    """Report the selected range and the outcome of the last refresh."""
    latest = coordinator.latest
    return APIResponse(
        success=coordinator.last_error is None,
        message=coordinator.last_error,
        data={
            "range": coordinator.range,
            "last_refresh": latest.generated_at.isoformat() if latest else None,
            "rows": len(latest.rows) if latest else 0,
            "failed_tickers": sorted(latest.failures) if latest else [],
            "checked_at": datetime.now().isoformat(),
        }
    )
