"""
Unit tests for the analyzer session state and request orchestration.
"""
import asyncio

import httpx
import pytest

from stock_viewer.client import AnalyticsClient
from stock_viewer.models import AnalysisDocument
from stock_viewer.session import (
    PERIODS, AnalyzerSession, AnalyzerState,
    PeriodChanged, RequestCancelled, RequestFailed, RequestStarted, RequestSucceeded,
    TickerChanged,
    get_period, reduce,
)

pytestmark = pytest.mark.unit


class TestReduce:

    def test_ticker_is_upper_cased(self):
        state = reduce(AnalyzerState(), TickerChanged(ticker=" aapl "))
        assert state.ticker == "AAPL"

    def test_state_is_not_mutated(self):
        before = AnalyzerState()
        after = reduce(before, RequestStarted(request_id=1, ticker="AAPL", period="1mo"))
        assert before.loading is False
        assert after.loading is True
        with pytest.raises(Exception):
            after.loading = False

    def test_started_clears_error_but_keeps_document(self):
        document = AnalysisDocument()
        state = AnalyzerState(document=document, error="old")
        state = reduce(state, RequestStarted(request_id=1, ticker="AAPL", period="1mo"))
        assert state.error is None
        assert state.document is document

    def test_success_replaces_document(self):
        state = reduce(AnalyzerState(error="old"),
                       RequestStarted(request_id=3, ticker="AAPL", period="2y"))
        document = AnalysisDocument.model_validate({"metadata": {"ticker": "AAPL"}})
        state = reduce(state, RequestSucceeded(request_id=3, document=document))

        assert state.document == document
        assert state.document_ticker == "AAPL"
        assert state.document_period == "2y"
        assert state.loading is False
        assert state.error is None

    def test_failure_clears_document(self):
        state = AnalyzerState(document=AnalysisDocument(), request_id=1, loading=True)
        state = reduce(state, RequestFailed(request_id=1, message="Ticker not found"))
        assert state.document is None
        assert state.error == "Ticker not found"
        assert state.loading is False

    def test_stale_completion_is_dropped(self):
        state = AnalyzerState(request_id=2, loading=True)
        assert reduce(state, RequestFailed(request_id=1, message="late")) is state
        assert reduce(state, RequestSucceeded(request_id=1, document=AnalysisDocument())) is state

    def test_cancel_clears_loading_and_keeps_document(self):
        document = AnalysisDocument()
        state = AnalyzerState(document=document, error="old", request_id=4, loading=True)
        state = reduce(state, RequestCancelled(request_id=4))
        assert state.loading is False
        assert state.document is document
        assert state.error == "old"

    def test_stale_cancel_keeps_newer_request_loading(self):
        state = AnalyzerState(request_id=5, loading=True)
        assert reduce(state, RequestCancelled(request_id=4)) is state

    def test_period_change(self):
        assert reduce(AnalyzerState(), PeriodChanged(period="10y")).period == "10y"


class TestPeriods:

    def test_period_values(self):
        assert [p.value for p in PERIODS] == ["7d", "1mo", "6mo", "2y", "5y", "10y"]

    def test_unknown_period_passes_through(self):
        assert get_period("6mo").label == "6 Months"
        assert get_period("3w").label == "3w"


class TestAnalyzerSession:

    def test_empty_ticker_is_a_no_op(self, stub_analytics):
        stub = stub_analytics(lambda request: httpx.Response(200, json={}))
        session = AnalyzerSession(client_factory=stub.client, period="1mo")
        before = session.state

        after = asyncio.run(session.analyze())

        assert stub.requests == []
        assert after is before

    def test_successful_request(self, stub_analytics, aapl_document):
        stub = stub_analytics(lambda request: httpx.Response(200, json=aapl_document))
        session = AnalyzerSession(client_factory=stub.client, period="1mo")
        session.set_ticker("aapl")

        state = asyncio.run(session.analyze())

        assert state.loading is False
        assert state.error is None
        view = session.view()
        assert view.dashboard.header.ticker == "AAPL"
        assert view.dashboard.moving_averages.signal == "Golden Cross (Bullish)"
        assert view.dashboard.rsi is None

    def test_failed_request_shows_detail(self, stub_analytics, aapl_document):
        responses = [
            httpx.Response(200, json=aapl_document),
            httpx.Response(404, json={"detail": "Ticker not found"}),
        ]
        stub = stub_analytics(lambda request: responses.pop(0))
        session = AnalyzerSession(client_factory=stub.client, period="1mo")
        session.set_ticker("AAPL")
        asyncio.run(session.analyze())
        session.set_ticker("NOPE")

        state = asyncio.run(session.analyze())

        assert state.error == "Ticker not found"
        assert state.document is None
        view = session.view()
        assert view.error == "Ticker not found"
        assert view.dashboard is None

    def test_error_is_replaced_on_next_attempt(self, stub_analytics, aapl_document):
        responses = [
            httpx.Response(500, text="boom"),
            httpx.Response(200, json=aapl_document),
        ]
        stub = stub_analytics(lambda request: responses.pop(0))
        session = AnalyzerSession(client_factory=stub.client, period="1mo")
        session.set_ticker("AAPL")

        assert asyncio.run(session.analyze()).error == "Error fetching data"
        assert asyncio.run(session.analyze()).error is None

    def test_unexpected_error_is_contained(self):
        class BrokenClient:
            async def fetch_analysis(self, ticker, period):
                raise RuntimeError("boom")

        session = AnalyzerSession(client_factory=BrokenClient, period="1mo")
        session.set_ticker("AAPL")

        state = asyncio.run(session.analyze())

        assert state.error == "Error fetching data"
        assert state.loading is False

    def test_newer_request_wins_over_slow_one(self, aapl_document):
        async def scenario():
            release = asyncio.Event()

            async def handler(request):
                ticker = request.url.path.rsplit("/", 1)[-1]
                if ticker == "SLOW":
                    await release.wait()
                body = dict(aapl_document, metadata={"ticker": ticker})
                return httpx.Response(200, json=body)

            def client_factory():
                return AnalyticsClient("http://analytics.test",
                                       transport=httpx.MockTransport(handler))

            session = AnalyzerSession(client_factory=client_factory, period="1mo")
            session.set_ticker("slow")
            slow = asyncio.create_task(session.analyze())
            for _ in range(10):
                await asyncio.sleep(0)
            assert session.state.loading is True

            session.set_ticker("fast")
            await session.analyze()
            release.set()
            await slow
            return session

        session = asyncio.run(scenario())

        assert session.state.document.metadata.ticker == "FAST"
        assert session.state.loading is False
        assert session.view().dashboard.ticker == "FAST"

    def test_cancelled_request_clears_loading(self, stub_analytics, aapl_document):
        stub = stub_analytics(lambda request: httpx.Response(200, json=aapl_document))

        class CancellingClient:
            async def fetch_analysis(self, ticker, period):
                raise asyncio.CancelledError()

        clients = [stub.client(), CancellingClient()]
        session = AnalyzerSession(client_factory=lambda: clients.pop(0), period="1mo")
        session.set_ticker("AAPL")
        asyncio.run(session.analyze())

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(session.analyze())

        assert session.state.loading is False
        assert session.state.request_id == 2
        assert session.view().dashboard.ticker == "AAPL"
