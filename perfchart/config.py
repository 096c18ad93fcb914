"""
Application configuration.

Tickers, ranges and the sampling interval are fixed constants. Provider and
runtime settings are read from the environment, optionally seeded from a
project-root .env file.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, get_args

from dotenv import load_dotenv

from .models import ChartRange, TickerConfig

logger = logging.getLogger(__name__)

# Path to .env file
ENV_PATH = Path(__file__).parent.parent / ".env"

TICKERS: Tuple[TickerConfig, ...] = (
    TickerConfig(symbol="FXAIX", display_name="Fidelity 500 Index"),
    TickerConfig(symbol="FFTHX", display_name="Fidelity Freedom 2035"),
    TickerConfig(symbol="JEPI", display_name="JPMorgan Equity Premium Income"),
    TickerConfig(symbol="SCHD", display_name="Schwab U.S. Dividend Equity"),
    TickerConfig(symbol="O", display_name="Realty Income"),
)

VALID_RANGES: Tuple[str, ...] = get_args(ChartRange)
DEFAULT_RANGE = "5y"
INTERVAL = "1mo"

DEFAULT_PROVIDER_URL = "https://query1.finance.yahoo.com"

# The provider rejects requests without a browser-like agent
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment."""
    provider_url: str = DEFAULT_PROVIDER_URL
    timeout_seconds: float = 10.0
    default_range: str = DEFAULT_RANGE
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Load settings from .env and the process environment."""
    load_dotenv(ENV_PATH)

    default_range = os.getenv("PERFCHART_DEFAULT_RANGE", DEFAULT_RANGE).strip().lower()
    if default_range not in VALID_RANGES:
        logger.warning(f"Ignoring invalid PERFCHART_DEFAULT_RANGE={default_range!r}")
        default_range = DEFAULT_RANGE

    try:
        timeout = float(os.getenv("PERFCHART_TIMEOUT_SECONDS", "10"))
    except ValueError:
        logger.warning("Ignoring non-numeric PERFCHART_TIMEOUT_SECONDS")
        timeout = 10.0

    return Settings(
        provider_url=os.getenv("PERFCHART_PROVIDER_URL", DEFAULT_PROVIDER_URL).rstrip("/"),
        timeout_seconds=timeout,
        default_range=default_range,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
