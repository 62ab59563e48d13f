"""
Stock Viewer - Main FastAPI Application

Technical indicator dashboard backed by a remote analytics API.
"""

from fastapi import FastAPI, Request, HTTPException, Query
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from . import config
from .api import dashboard, session as session_api, settings
from .charts.generator import chart_generator
from .models import normalize_ticker
from .session import PERIODS, session

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Package directory
PACKAGE_ROOT = Path(__file__).parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Stock Viewer...")
    logger.info(f"Analytics API: {config.get_analytics_api_url()}")

    yield

    logger.info("Shutting down Stock Viewer...")


# Create FastAPI application
app = FastAPI(
    title="Stock Viewer",
    description="Technical indicator dashboard for moving averages, RSI and VWAP",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8080", "http://127.0.0.1:8080"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Set up templates
templates = Jinja2Templates(directory=str(PACKAGE_ROOT / "templates"))


# ===========================================
# Include API Routers
# ===========================================

app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(session_api.router, prefix="/api/session", tags=["Session"])
app.include_router(settings.router, prefix="/api/settings", tags=["Settings"])


# ===========================================
# HTML Page Routes
# ===========================================

def render_analyzer(request: Request, status_code: int = 200):
    view = session.view()
    charts = {}
    if view.dashboard is not None:
        try:
            charts = chart_generator.generate_all_charts(view.dashboard)
        except Exception as e:
            logger.error(f"Failed to render charts: {e}")
    return templates.TemplateResponse(
        request,
        "analyze.html",
        {"page": "analyze", "view": view, "periods": PERIODS, "charts": charts},
        status_code=status_code
    )


@app.get("/", response_class=HTMLResponse)
async def analyzer_page(request: Request):
    """Analyzer page showing the current session."""
    return render_analyzer(request)


@app.get("/analyze", response_class=HTMLResponse)
async def analyze_page(request: Request, ticker: str = Query(""),
                       period: Optional[str] = Query(None)):
    """Submit the analyzer form and render the result.

    An empty or malformed ticker leaves the session untouched.
    """
    try:
        ticker = normalize_ticker(ticker)
    except ValueError:
        return render_analyzer(request, status_code=400)
    if not ticker:
        return render_analyzer(request)

    session.set_ticker(ticker)
    if period:
        session.set_period(period)
    await session.analyze()
    return render_analyzer(request)


# ===========================================
# Error Handlers
# ===========================================

@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    """Handle 404 errors."""
    if request.url.path.startswith("/api/"):
        message = getattr(exc, "detail", None) or "Resource not found"
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": message, "detail": message}
        )
    return HTMLResponse("<h1>Page not found</h1>", status_code=404)


@app.exception_handler(500)
async def server_error_handler(request: Request, exc: Exception):
    """Handle 500 errors."""
    logger.error(f"Server error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"}
    )


# ===========================================
# Health Check
# ===========================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "analytics_api": config.get_analytics_api_url()
    }
