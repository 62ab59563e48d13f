"""
Dashboard API endpoints.

Fetches the analysis document for a ticker and returns the aligned,
classified chart panels, either as JSON or as rendered chart images.
"""

import logging
from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional

from .. import config
from ..client import AnalyticsAPIError, get_analytics_client
from ..models import Dashboard, Period, normalize_ticker
from ..pipeline.presenter import build_dashboard
from ..session import PERIODS
from ..charts.generator import chart_generator

router = APIRouter()
logger = logging.getLogger(__name__)

CHART_TYPES = ("moving_averages", "rsi", "vwap")


async def load_dashboard(ticker: str, period: Optional[str]) -> Dashboard:
    """Fetch one analysis document and build its dashboard."""
    try:
        ticker = normalize_ticker(ticker)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    period = period or config.get_default_period()

    if not ticker:
        raise HTTPException(status_code=400, detail="Ticker symbol is required")

    try:
        document = await get_analytics_client().fetch_analysis(ticker, period)
    except AnalyticsAPIError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return build_dashboard(document, ticker, period)


@router.get("/periods", response_model=List[Period])
async def get_periods():
    """List the selectable analysis periods."""
    return PERIODS


@router.get("/{ticker}", response_model=Dashboard)
async def get_dashboard(ticker: str, period: Optional[str] = Query(None)):
    """Get aligned chart data and indicator states for a stock."""
    logger.info(f"Building dashboard for {ticker} ({period})")
    return await load_dashboard(ticker, period)


@router.get("/{ticker}/chart-images")
async def get_chart_images(ticker: str, period: Optional[str] = Query(None),
                           chart_type: Optional[str] = None):
    """Get chart images as base64-encoded data URLs.

    Args:
        ticker: Stock ticker symbol
        period: Analysis period token (e.g. 1mo)
        chart_type: Optional specific chart (moving_averages, rsi, vwap).
                   If not specified, returns every chart with data

    Returns:
        Dictionary of chart names to base64 data URLs
    """
    if chart_type:
        chart_type = chart_type.lower()
        if chart_type not in CHART_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown chart type: {chart_type}. Valid types: {', '.join(CHART_TYPES)}"
            )

    dashboard = await load_dashboard(ticker, period)

    try:
        if chart_type:
            panel = getattr(dashboard, chart_type)
            if panel is None:
                raise HTTPException(
                    status_code=404,
                    detail=f"No {chart_type} data available for {dashboard.ticker}"
                )
            if chart_type == "moving_averages":
                chart = chart_generator.generate_moving_average_chart(panel, dashboard.ticker)
            elif chart_type == "rsi":
                chart = chart_generator.generate_rsi_chart(panel, dashboard.ticker)
            else:
                chart = chart_generator.generate_vwap_chart(panel, dashboard.ticker)
            return {"ticker": dashboard.ticker, "chart_type": chart_type, "image": chart}

        return {
            "ticker": dashboard.ticker,
            "charts": chart_generator.generate_all_charts(dashboard),
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating chart images for {ticker}: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate chart images: {str(e)}"
        )
