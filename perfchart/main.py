"""
Performance Chart - Main FastAPI Application

Single-page dashboard comparing the normalized monthly performance of the
configured tickers.
"""

from fastapi import FastAPI, Request, HTTPException
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse, JSONResponse
from contextlib import asynccontextmanager
from pathlib import Path
import logging

import httpx

from .agents import PerformanceOrchestrator, RefreshCoordinator, SeriesFetcher
from .api import performance, tickers
from .config import TICKERS, VALID_RANGES, get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Performance Chart...")

    client = httpx.AsyncClient(timeout=settings.timeout_seconds)
    fetcher = SeriesFetcher(client, base_url=settings.provider_url)
    app.state.coordinator = RefreshCoordinator(
        PerformanceOrchestrator(fetcher, TICKERS),
        default_range=settings.default_range,
    )
    logger.info(f"Provider: {settings.provider_url} (default range {settings.default_range})")

    yield

    # Shutdown
    logger.info("Shutting down Performance Chart...")
    await app.state.coordinator.aclose()
    await client.aclose()


# Create FastAPI application
app = FastAPI(
    title="Performance Chart",
    description="Normalized multi-ticker performance dashboard",
    version="1.0.0",
    lifespan=lifespan
)

# Mount static files
static_path = PROJECT_ROOT / "static"
if static_path.exists():
    app.mount("/static", StaticFiles(directory=str(static_path)), name="static")

# Set up templates
templates_path = PROJECT_ROOT / "templates"
templates = Jinja2Templates(directory=str(templates_path))


# ===========================================
# Include API Routers
# ===========================================

app.include_router(performance.router, prefix="/api/performance", tags=["Performance"])
app.include_router(tickers.router, prefix="/api/tickers", tags=["Tickers"])


# ===========================================
# HTML Page Routes
# ===========================================

@app.get("/", response_class=HTMLResponse)
async def dashboard(request: Request):
    """Dashboard page - performance chart with range and ticker toggles."""
    coordinator = request.app.state.coordinator
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "page": "dashboard",
            "tickers": coordinator.tickers,
            "ranges": VALID_RANGES,
            "selected_range": coordinator.range,
        }
    )


# ===========================================
# Error Handlers
# ===========================================

@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    """Handle 404 errors."""
    if request.url.path.startswith("/api/"):
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": getattr(exc, "detail", None) or "Resource not found"}
        )
    return HTMLResponse("<h1>Page not found</h1>", status_code=404)


@app.exception_handler(500)
async def server_error_handler(request: Request, exc: Exception):
    """Handle 500 errors."""
    logger.error(f"Server error: {exc}")
    if request.url.path.startswith("/api/"):
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"}
        )
    return HTMLResponse("<h1>Internal server error</h1>", status_code=500)


# ===========================================
# Health Check
# ===========================================

@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    coordinator = request.app.state.coordinator
    return {
        "status": "healthy",
        "range": coordinator.range,
        "data": "loaded" if coordinator.latest else "not loaded"
    }
