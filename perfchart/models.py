"""
Pydantic models for data validation and serialization.

These models are used for:
- Data transfer between the fetcher, aligner and orchestrator
- Request/response validation in the API
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Literal
from datetime import datetime
import re


ChartRange = Literal["1y", "5y"]


# ===========================================
# Ticker Models
# ===========================================

class TickerConfig(BaseModel):
    """A configured ticker symbol and its display name."""
    symbol: str = Field(..., min_length=1, max_length=10, description="Ticker symbol")
    display_name: str

    model_config = {"frozen": True}

    @field_validator('symbol')
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Validate and normalize ticker symbol."""
        v = v.strip().upper()
        if not re.match(r'^[A-Z0-9.\-^=]+$', v):
            raise ValueError('Invalid ticker symbol format')
        return v


class TickerVisibility(TickerConfig):
    """Ticker with its chart visibility flag."""
    enabled: bool = True


class VisibilityUpdate(BaseModel):
    """Request body for toggling a ticker."""
    enabled: bool


class RangeUpdate(BaseModel):
    """Request body for selecting the chart range."""
    range: ChartRange


# ===========================================
# Series Models
# ===========================================

class RawPricePoint(BaseModel):
    """A provider price point; close may be missing."""
    timestamp: int
    close: Optional[float] = None


class NormalizedPoint(BaseModel):
    """Monthly value rescaled so the first point of its series is 100."""
    date_label: str = Field(..., pattern=r'^\d{4}-\d{2}$')
    value: float

    model_config = {"frozen": True}


class AlignedRow(BaseModel):
    """One date of the outer-joined table; tickers without data are absent."""
    date_label: str
    values: Dict[str, float] = Field(default_factory=dict)


# ===========================================
# API Response Models
# ===========================================

class PerformanceResponse(BaseModel):
    """Aligned performance data for the dashboard."""
    range: ChartRange
    rows: List[AlignedRow]
    tickers: List[TickerVisibility]
    failed_tickers: List[str] = Field(default_factory=list)
    generated_at: datetime


class ChartImageResponse(BaseModel):
    """Rendered chart as a base64 data URL."""
    range: ChartRange
    image: str


class APIResponse(BaseModel):
    """Generic API response model."""
    success: bool
    message: Optional[str] = None
    data: Optional[dict] = None
