"""
Chart panel assembly.

Combines aligned rows, the classified state and the formatted summary scalars
into one panel per chart. A panel is None when its chart has no data; the
other panels are built independently.
"""

import logging
from typing import Optional

from ..models import (
    AnalysisDocument, Dashboard, DashboardHeader,
    MovingAveragePanel, MovingAverageRow, MovingAverageSummary,
    RsiPanel, RsiRow, RsiSummary,
    VwapPanel, VwapRow, VwapSummary,
)
from .alignment import align_chart
from .classification import (
    RSI_DISPLAY, TREND_DISPLAY, VWAP_DISPLAY,
    classify_rsi, classify_trend, classify_vwap,
)
from .formatting import format_number, format_price

logger = logging.getLogger(__name__)


MOVING_AVERAGES_TITLE = "Moving Averages"
MOVING_AVERAGES_DESCRIPTION = (
    "Moving averages help identify trends by smoothing out price fluctuations. "
    "The 50-day and 200-day moving averages are widely used indicators. When the "
    "50-day crosses above the 200-day (Golden Cross), it's considered bullish; "
    "when it crosses below (Death Cross), it's considered bearish."
)

RSI_TITLE = "RSI (Relative Strength Index)"
RSI_DESCRIPTION = (
    "RSI measures the speed and magnitude of recent price changes to evaluate "
    "whether a stock is overbought or oversold. Values above 70 suggest the stock "
    "might be overbought (potentially overvalued), while values below 30 suggest "
    "it might be oversold (potentially undervalued)."
)

VWAP_TITLE = "VWAP & Volume Analysis"
VWAP_DESCRIPTION = (
    "Volume Weighted Average Price (VWAP) combines price and volume data to show "
    "the average price a stock has traded at, weighted by volume. When price is "
    "above VWAP, it suggests buying pressure; when below, it suggests selling "
    "pressure. Volume bars show trading activity, and higher volumes often "
    "validate price movements."
)

NOT_AVAILABLE = "N/A"


def _summary(document: AnalysisDocument, name: str):
    if document.analysis is None:
        return None
    return getattr(document.analysis, name, None)


def build_moving_average_panel(document: AnalysisDocument) -> Optional[MovingAveragePanel]:
    """Build the moving averages panel, or None without dates and price."""
    rows = align_chart(document.timeseries, "moving_averages")
    if rows is None:
        return None

    summary = _summary(document, "moving_averages") or MovingAverageSummary()
    trend = classify_trend(summary)
    signal, tone = TREND_DISPLAY[trend]

    latest_price = format_number(summary.latest_price)
    latest_50ma = format_number(summary.latest_50ma)
    latest_200ma = format_number(summary.latest_200ma)

    return MovingAveragePanel(
        title=MOVING_AVERAGES_TITLE,
        description=MOVING_AVERAGES_DESCRIPTION,
        rows=[MovingAverageRow(**row) for row in rows],
        trend=trend.value,
        signal=signal,
        tone=tone,
        latest_price=latest_price,
        latest_50ma=latest_50ma,
        latest_200ma=latest_200ma,
        lines=[
            f"Current Price: {format_price(summary.latest_price)}",
            f"50-day MA: {format_price(summary.latest_50ma)}",
            f"200-day MA: {format_price(summary.latest_200ma)}",
        ],
    )


def build_rsi_panel(document: AnalysisDocument) -> Optional[RsiPanel]:
    """Build the RSI panel, or None without dates and an RSI series."""
    rows = align_chart(document.timeseries, "rsi")
    if rows is None:
        return None

    summary = _summary(document, "rsi") or RsiSummary()
    condition = classify_rsi(summary)
    signal, tone = RSI_DISPLAY[condition]
    current_rsi = format_number(summary.current_rsi)

    return RsiPanel(
        title=RSI_TITLE,
        description=RSI_DESCRIPTION,
        rows=[RsiRow(**row) for row in rows],
        condition=condition.value,
        signal=signal,
        tone=tone,
        current_rsi=current_rsi,
        lines=[f"Current RSI: {current_rsi}"],
    )


def build_vwap_panel(document: AnalysisDocument) -> Optional[VwapPanel]:
    """Build the VWAP and volume panel, or None without dates, price and VWAP."""
    rows = align_chart(document.timeseries, "vwap")
    if rows is None:
        return None

    summary = _summary(document, "vwap") or VwapSummary()
    position = classify_vwap(summary)
    signal, tone = VWAP_DISPLAY[position]

    return VwapPanel(
        title=VWAP_TITLE,
        description=VWAP_DESCRIPTION,
        rows=[VwapRow(**row) for row in rows],
        position=position.value,
        signal=signal,
        tone=tone,
        current_vwap=format_number(summary.current_vwap),
        lines=[f"Current VWAP: {format_price(summary.current_vwap)}"],
    )


def build_header(document: AnalysisDocument, ticker: str = "") -> Optional[DashboardHeader]:
    """Company heading, or None when the document carries no metadata."""
    metadata = document.metadata
    if metadata is None:
        return None

    symbol = metadata.ticker or ticker
    return DashboardHeader(
        title=metadata.company_name or symbol,
        ticker=symbol,
        subtitle=f"{metadata.sector or NOT_AVAILABLE} | {metadata.industry or NOT_AVAILABLE}",
    )


def build_dashboard(document: AnalysisDocument, ticker: str, period: str) -> Dashboard:
    """Build every panel for one analysis document.

    Panels are only shown below the company header, so a document without
    metadata produces an empty dashboard.
    """
    header = build_header(document, ticker)
    if header is None:
        logger.warning(f"Analysis document for {ticker} has no metadata, nothing to render")
        return Dashboard(ticker=ticker, period=period)

    return Dashboard(
        ticker=header.ticker,
        period=period,
        header=header,
        moving_averages=build_moving_average_panel(document),
        rsi=build_rsi_panel(document),
        vwap=build_vwap_panel(document),
    )
