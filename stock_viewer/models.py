"""
Pydantic models for data validation and serialization.

These models are used for:
- Parsing the analysis document returned by the analytics API
- Aligned chart rows and indicator panels produced by the pipeline
- Request/response validation in the viewer API
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Literal
import re


Tone = Literal['bullish', 'bearish', 'neutral']


# ===========================================
# Analysis Document Models
# ===========================================

class Metadata(BaseModel):
    """Company metadata for the requested ticker."""
    model_config = ConfigDict(extra='allow')

    ticker: Optional[str] = None
    company_name: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None


class Timeseries(BaseModel):
    """Parallel series indexed by ``dates``. Any series may be missing or short."""
    model_config = ConfigDict(extra='allow')

    dates: Optional[List[str]] = None
    price: Optional[List[Optional[float]]] = None
    fifty_ma: Optional[List[Optional[float]]] = None
    twohundred_ma: Optional[List[Optional[float]]] = None
    rsi: Optional[List[Optional[float]]] = None
    vwap: Optional[List[Optional[float]]] = None
    volume: Optional[List[Optional[float]]] = None


class MovingAverageSummary(BaseModel):
    """Latest moving average values and the golden cross flag."""
    model_config = ConfigDict(extra='allow')

    latest_price: Optional[float] = 0
    latest_50ma: Optional[float] = 0
    latest_200ma: Optional[float] = 0
    is_golden_cross: Optional[bool] = False


class RsiSummary(BaseModel):
    """Latest RSI value and its overbought/oversold flags."""
    model_config = ConfigDict(extra='allow')

    current_rsi: Optional[float] = 0
    is_overbought: Optional[bool] = False
    is_oversold: Optional[bool] = False


class VwapSummary(BaseModel):
    """Latest VWAP value and price position flag."""
    model_config = ConfigDict(extra='allow')

    current_vwap: Optional[float] = 0
    price_above_vwap: Optional[bool] = False


class AnalysisSummaries(BaseModel):
    model_config = ConfigDict(extra='allow')

    moving_averages: Optional[MovingAverageSummary] = None
    rsi: Optional[RsiSummary] = None
    vwap: Optional[VwapSummary] = None


class AnalysisDocument(BaseModel):
    """Full response of ``GET /api/stock/{ticker}`` on the analytics API."""
    model_config = ConfigDict(extra='allow')

    metadata: Optional[Metadata] = None
    timeseries: Optional[Timeseries] = None
    analysis: Optional[AnalysisSummaries] = None


# ===========================================
# Aligned Chart Rows
# ===========================================

class MovingAverageRow(BaseModel):
    date: str
    price: float
    ma50: float
    ma200: float


class RsiRow(BaseModel):
    date: str
    rsi: float


class VwapRow(BaseModel):
    date: str
    price: float
    vwap: float
    volume: float


# ===========================================
# Indicator Panels
# ===========================================

class MovingAveragePanel(BaseModel):
    """Moving averages chart with its golden/death cross classification."""
    title: str
    description: str
    rows: List[MovingAverageRow]
    trend: Literal['GoldenCross', 'DeathCross']
    signal: str
    tone: Tone
    latest_price: str
    latest_50ma: str
    latest_200ma: str
    lines: List[str]


class RsiPanel(BaseModel):
    """RSI chart with its overbought/oversold/neutral classification."""
    title: str
    description: str
    rows: List[RsiRow]
    condition: Literal['Overbought', 'Oversold', 'Neutral']
    signal: str
    tone: Tone
    current_rsi: str
    lines: List[str]


class VwapPanel(BaseModel):
    """VWAP and volume chart with the price position classification."""
    title: str
    description: str
    rows: List[VwapRow]
    position: Literal['AbovePrice', 'BelowPrice']
    signal: str
    tone: Tone
    current_vwap: str
    lines: List[str]


class DashboardHeader(BaseModel):
    title: str
    ticker: str
    subtitle: str


class Dashboard(BaseModel):
    """Everything needed to render one (ticker, period) request."""
    ticker: str
    period: str
    header: Optional[DashboardHeader] = None
    moving_averages: Optional[MovingAveragePanel] = None
    rsi: Optional[RsiPanel] = None
    vwap: Optional[VwapPanel] = None


# ===========================================
# Session Models
# ===========================================

class Period(BaseModel):
    value: str
    label: str


def normalize_ticker(value: str) -> str:
    """Strip and upper-case a ticker symbol, rejecting malformed ones.

    An empty ticker is returned as-is.
    """
    value = value.strip().upper()
    if value and (len(value) > 10 or not re.match(r'^[A-Z0-9.\-^=]+$', value)):
        raise ValueError('Invalid ticker symbol format')
    return value


class TickerUpdate(BaseModel):
    """Model for changing the session ticker."""
    ticker: str = Field('', max_length=10)

    @field_validator('ticker')
    @classmethod
    def validate_ticker(cls, v: str) -> str:
        return normalize_ticker(v)


class PeriodUpdate(BaseModel):
    """Model for changing the session period."""
    period: str = Field(..., min_length=1)


class SessionView(BaseModel):
    """Snapshot of the analyzer session as seen by the page."""
    ticker: str
    period: Period
    loading: bool
    error: Optional[str] = None
    dashboard: Optional[Dashboard] = None


# ===========================================
# Settings Models
# ===========================================

class SettingsUpdate(BaseModel):
    """Model for updating settings."""
    analytics_api_url: Optional[str] = None
    request_timeout_seconds: Optional[float] = Field(None, gt=0, le=300)
    default_period: Optional[str] = None


class Settings(BaseModel):
    """Model for viewer settings."""
    analytics_api_url: str
    request_timeout_seconds: float
    default_period: str


# ===========================================
# API Response Models
# ===========================================

class APIResponse(BaseModel):
    """Generic API response model."""
    success: bool
    message: Optional[str] = None
    data: Optional[dict] = None
