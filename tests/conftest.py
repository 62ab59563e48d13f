"""
pytest configuration for the stock_viewer test suite.

Marks:
  @pytest.mark.unit    - pure pipeline/session logic, no HTTP app
  @pytest.mark.api     - exercises the FastAPI app through TestClient

The analytics service is never contacted: every test stubs it with
httpx.MockTransport.
"""
import copy
import os
import sys

import httpx
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stock_viewer.client import AnalyticsClient  # noqa: E402

ANALYTICS_URL = "http://analytics.test"


AAPL_DOCUMENT = {
    "metadata": {"ticker": "AAPL"},
    "timeseries": {
        "dates": ["d1", "d2"],
        "price": [100, 110],
        "fifty_ma": [90],
        "twohundred_ma": [95, 96],
    },
    "analysis": {
        "moving_averages": {
            "latest_price": 110,
            "latest_50ma": 90,
            "latest_200ma": 96,
            "is_golden_cross": True,
        }
    },
}


FULL_DOCUMENT = {
    "metadata": {
        "ticker": "MSFT",
        "company_name": "Microsoft Corporation",
        "sector": "Technology",
        "industry": "Software - Infrastructure",
    },
    "timeseries": {
        "dates": ["2024-01-02", "2024-01-03", "2024-01-04"],
        "price": [370.6, 370.9, 367.9],
        "fifty_ma": [360.1, 361.0, 361.8],
        "twohundred_ma": [335.2, 335.6, 336.0],
        "rsi": [55.3, 56.1, None],
        "vwap": [369.8, 370.2, 369.1],
        "volume": [25258600, 23083500, 20901500],
    },
    "analysis": {
        "moving_averages": {
            "latest_price": 367.9,
            "latest_50ma": 361.8,
            "latest_200ma": 336.0,
            "is_golden_cross": True,
        },
        "rsi": {"current_rsi": 56.1, "is_overbought": False, "is_oversold": False},
        "vwap": {"current_vwap": 369.1, "price_above_vwap": False},
    },
}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast unit tests, no HTTP app")
    config.addinivalue_line("markers", "api: FastAPI routes through TestClient")


@pytest.fixture
def aapl_document():
    return copy.deepcopy(AAPL_DOCUMENT)


@pytest.fixture
def full_document():
    return copy.deepcopy(FULL_DOCUMENT)


class StubAnalytics:
    """Records requests and answers them from a handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> AnalyticsClient:
        return AnalyticsClient(ANALYTICS_URL, timeout=5, transport=httpx.MockTransport(self))


@pytest.fixture
def stub_analytics():
    """Build a StubAnalytics from a handler function."""
    return StubAnalytics
