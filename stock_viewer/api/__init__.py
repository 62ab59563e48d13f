# Stock Viewer - API Package
"""
FastAPI route handlers for the web API.

Routers:
- dashboard: Aligned indicator charts for a ticker and period
- session: Analyzer page state and actions
- settings: Viewer configuration endpoints
"""

from . import dashboard
from . import session
from . import settings

__all__ = [
    "dashboard",
    "session",
    "settings",
]
