"""
Analyzer session API endpoints.

Exposes the page state (ticker, period, dashboard, loading flag, error) and
the actions that change it.
"""

import logging
from fastapi import APIRouter

from ..models import PeriodUpdate, SessionView, TickerUpdate
from ..session import session

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=SessionView)
async def get_session():
    """Get the current analyzer state."""
    return session.view()


@router.put("/ticker", response_model=SessionView)
async def update_ticker(update: TickerUpdate):
    """Change the ticker. Does not trigger a request."""
    session.set_ticker(update.ticker)
    return session.view()


@router.put("/period", response_model=SessionView)
async def update_period(update: PeriodUpdate):
    """Change the period. Does not trigger a request."""
    session.set_period(update.period)
    return session.view()


@router.post("/analyze", response_model=SessionView)
async def analyze():
    """Run the analysis for the current ticker and period.

    Always answers 200: upstream failures are reported in the ``error`` field.
    """
    state = await session.analyze()
    if state.error:
        logger.info(f"Analysis for {state.ticker} failed: {state.error}")
    return session.view()
