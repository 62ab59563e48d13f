"""
Analyzer session state.

The page state (ticker, period, current document, loading flag, error) is one
immutable snapshot. Events move it from one snapshot to the next through
``reduce``; ``AnalyzerSession`` issues the events around each analytics API
call.

Every request is tagged with a monotonically increasing id. A completion is
applied only if its id is the latest one issued, so a slow response can never
overwrite the result of a newer request.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from . import config
from .client import GENERIC_ERROR_MESSAGE, AnalyticsAPIError, AnalyticsClient, get_analytics_client
from .models import AnalysisDocument, Period, SessionView
from .pipeline.presenter import build_dashboard

logger = logging.getLogger(__name__)


PERIODS: List[Period] = [
    Period(value="7d", label="7 Days"),
    Period(value="1mo", label="1 Month"),
    Period(value="6mo", label="6 Months"),
    Period(value="2y", label="2 Years"),
    Period(value="5y", label="5 Years"),
    Period(value="10y", label="10 Years"),
]


def get_period(value: str) -> Period:
    """Look up a period by value. Unknown values are passed through as-is."""
    for period in PERIODS:
        if period.value == value:
            return period
    return Period(value=value, label=value)


# ===========================================
# State and Events
# ===========================================

class AnalyzerState(BaseModel):
    """Immutable snapshot of the analyzer page."""
    model_config = ConfigDict(frozen=True)

    ticker: str = ""
    period: str = "1mo"
    document: Optional[AnalysisDocument] = None
    document_ticker: str = ""
    document_period: str = ""
    loading: bool = False
    error: Optional[str] = None
    request_id: int = 0
    pending_ticker: str = ""
    pending_period: str = ""


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class TickerChanged(Event):
    ticker: str


class PeriodChanged(Event):
    period: str


class RequestStarted(Event):
    request_id: int
    ticker: str
    period: str


class RequestSucceeded(Event):
    request_id: int
    document: AnalysisDocument


class RequestFailed(Event):
    request_id: int
    message: str


class RequestCancelled(Event):
    request_id: int


AnyEvent = Union[TickerChanged, PeriodChanged, RequestStarted, RequestSucceeded,
                 RequestFailed, RequestCancelled]


def reduce(state: AnalyzerState, event: AnyEvent) -> AnalyzerState:
    """Return the state that follows ``event``. Never mutates ``state``."""
    if isinstance(event, TickerChanged):
        return state.model_copy(update={"ticker": event.ticker.strip().upper()})

    if isinstance(event, PeriodChanged):
        return state.model_copy(update={"period": event.period})

    if isinstance(event, RequestStarted):
        return state.model_copy(update={
            "loading": True,
            "error": None,
            "request_id": event.request_id,
            "pending_ticker": event.ticker,
            "pending_period": event.period,
        })

    if isinstance(event, (RequestSucceeded, RequestFailed, RequestCancelled)):
        if event.request_id != state.request_id:
            logger.warning(
                f"Dropping stale response for request {event.request_id} "
                f"(latest is {state.request_id})"
            )
            return state

        if isinstance(event, RequestSucceeded):
            return state.model_copy(update={
                "document": event.document,
                "document_ticker": state.pending_ticker,
                "document_period": state.pending_period,
                "loading": False,
                "error": None,
            })

        if isinstance(event, RequestCancelled):
            # Nothing arrived: keep the previous document and error
            return state.model_copy(update={"loading": False})

        return state.model_copy(update={
            "document": None,
            "document_ticker": "",
            "document_period": "",
            "loading": False,
            "error": event.message,
        })

    raise TypeError(f"Unknown event: {event!r}")


# ===========================================
# Session
# ===========================================

class AnalyzerSession:
    """Drives the analyzer state through one request at a time."""

    def __init__(self, client_factory: Callable[[], AnalyticsClient] = get_analytics_client,
                 period: Optional[str] = None):
        self._client_factory = client_factory
        self._last_request_id = 0
        self.state = AnalyzerState(period=period or config.get_default_period())

    def dispatch(self, event: AnyEvent) -> AnalyzerState:
        self.state = reduce(self.state, event)
        return self.state

    def set_ticker(self, ticker: str) -> AnalyzerState:
        return self.dispatch(TickerChanged(ticker=ticker))

    def set_period(self, period: str) -> AnalyzerState:
        return self.dispatch(PeriodChanged(period=period))

    async def analyze(self) -> AnalyzerState:
        """Fetch the analysis document for the current ticker and period.

        An empty ticker does nothing. Failures never propagate: they clear the
        document and land in ``state.error``. Cancellation clears the loading
        flag and is re-raised.
        """
        ticker = self.state.ticker
        period = self.state.period
        if not ticker:
            return self.state

        self._last_request_id += 1
        request_id = self._last_request_id
        self.dispatch(RequestStarted(request_id=request_id, ticker=ticker, period=period))

        try:
            document = await self._client_factory().fetch_analysis(ticker, period)
        except asyncio.CancelledError:
            self.dispatch(RequestCancelled(request_id=request_id))
            raise
        except AnalyticsAPIError as e:
            return self.dispatch(RequestFailed(request_id=request_id, message=e.message))
        except Exception as e:
            logger.error(f"Unexpected error analyzing {ticker}: {e}")
            return self.dispatch(RequestFailed(request_id=request_id, message=GENERIC_ERROR_MESSAGE))

        return self.dispatch(RequestSucceeded(request_id=request_id, document=document))

    def view(self) -> SessionView:
        """Render the current snapshot. Panels are rebuilt on every call."""
        state = self.state
        dashboard = None
        if state.document is not None:
            dashboard = build_dashboard(state.document, state.document_ticker,
                                        state.document_period)
        return SessionView(
            ticker=state.ticker,
            period=get_period(state.period),
            loading=state.loading,
            error=state.error,
            dashboard=dashboard,
        )


# Process-wide session backing the analyzer page
session = AnalyzerSession()
