"""
Indicator state classification.

Each chart's state is a lookup over the boolean flags precomputed by the
analytics API. The tables enumerate every flag combination, so the result is
always exactly one state. A missing summary, or a flag sent as null, reads as
False.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Trend(str, Enum):
    GOLDEN_CROSS = "GoldenCross"
    DEATH_CROSS = "DeathCross"


class RsiCondition(str, Enum):
    OVERBOUGHT = "Overbought"
    OVERSOLD = "Oversold"
    NEUTRAL = "Neutral"


class VwapPosition(str, Enum):
    ABOVE = "AbovePrice"
    BELOW = "BelowPrice"


TREND_RULES: Dict[bool, Trend] = {
    True: Trend.GOLDEN_CROSS,
    False: Trend.DEATH_CROSS,
}

# Keyed on (is_overbought, is_oversold). Overbought wins when both are set.
RSI_RULES: Dict[Tuple[bool, bool], RsiCondition] = {
    (True, True): RsiCondition.OVERBOUGHT,
    (True, False): RsiCondition.OVERBOUGHT,
    (False, True): RsiCondition.OVERSOLD,
    (False, False): RsiCondition.NEUTRAL,
}

VWAP_RULES: Dict[bool, VwapPosition] = {
    True: VwapPosition.ABOVE,
    False: VwapPosition.BELOW,
}

# Display label and tone for each state
TREND_DISPLAY = {
    Trend.GOLDEN_CROSS: ("Golden Cross (Bullish)", "bullish"),
    Trend.DEATH_CROSS: ("Death Cross (Bearish)", "bearish"),
}

RSI_DISPLAY = {
    RsiCondition.OVERBOUGHT: ("Overbought", "bearish"),
    RsiCondition.OVERSOLD: ("Oversold", "bullish"),
    RsiCondition.NEUTRAL: ("Neutral", "neutral"),
}

VWAP_DISPLAY = {
    VwapPosition.ABOVE: ("Price is above VWAP (Bullish)", "bullish"),
    VwapPosition.BELOW: ("Price is below VWAP (Bearish)", "bearish"),
}


def _flag(summary: Optional[Any], name: str) -> bool:
    if summary is None:
        return False
    return bool(getattr(summary, name, False))


def classify_trend(summary: Optional[Any]) -> Trend:
    """Golden cross if ``is_golden_cross`` is set, death cross otherwise."""
    return TREND_RULES[_flag(summary, "is_golden_cross")]


def classify_rsi(summary: Optional[Any]) -> RsiCondition:
    """Overbought, oversold or neutral from the RSI summary flags."""
    key = (_flag(summary, "is_overbought"), _flag(summary, "is_oversold"))
    return RSI_RULES[key]


def classify_vwap(summary: Optional[Any]) -> VwapPosition:
    return VWAP_RULES[_flag(summary, "price_above_vwap")]
