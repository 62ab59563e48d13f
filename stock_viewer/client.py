"""
Analytics API client.

Fetches the precomputed analysis document (price history, moving averages,
RSI, VWAP and their summaries) for a ticker and period from the analytics
service.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from . import config
from .models import AnalysisDocument

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Error fetching data"


class AnalyticsAPIError(Exception):
    """Raised when the analytics service cannot deliver an analysis document."""

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_detail(response: httpx.Response) -> str:
    """Pull the ``detail`` string out of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_ERROR_MESSAGE
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return GENERIC_ERROR_MESSAGE


class AnalyticsClient:
    """Client for ``GET /api/stock/{ticker}?period={period}``."""

    def __init__(self, base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the client.

        Args:
            base_url: Analytics service origin, defaults to ANALYTICS_API_URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the service)
        """
        self.base_url = (base_url or config.get_analytics_api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else config.get_request_timeout()
        self._transport = transport

    async def fetch_analysis(self, ticker: str, period: str) -> AnalysisDocument:
        """Fetch and parse the analysis document for one ticker and period.

        The period is passed through untouched; the service validates it.

        Raises:
            AnalyticsAPIError: on transport failure, non-2xx status or an
                unreadable body
        """
        logger.info(f"Fetching analysis for {ticker} ({period}) from {self.base_url}")

        try:
            async with httpx.AsyncClient(base_url=self.base_url,
                                         timeout=self.timeout,
                                         transport=self._transport) as client:
                response = await client.get(f"/api/stock/{ticker}",
                                            params={"period": period})
        except httpx.RequestError as e:
            logger.error(f"Analytics API request failed for {ticker}: {e}")
            raise AnalyticsAPIError(GENERIC_ERROR_MESSAGE, status_code=502) from e

        if response.is_error:
            message = _error_detail(response)
            logger.error(f"Analytics API returned {response.status_code} for {ticker}: {message}")
            raise AnalyticsAPIError(message, status_code=response.status_code)

        try:
            return AnalysisDocument.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid analysis document for {ticker}: {e}")
            raise AnalyticsAPIError(GENERIC_ERROR_MESSAGE, status_code=502) from e


_client: Optional[AnalyticsClient] = None


def get_analytics_client() -> AnalyticsClient:
    """Shared client built from the current settings."""
    global _client
    if _client is None:
        _client = AnalyticsClient()
    return _client


def set_analytics_client(client: Optional[AnalyticsClient]) -> None:
    """Replace the shared client. Passing None rebuilds it on next use."""
    global _client
    _client = client
