"""Display formatting for indicator scalars."""

import math
from typing import Optional


def format_number(value: Optional[float]) -> str:
    """Format to two decimals. Missing, zero and NaN values show as "0.00"."""
    if not value or (isinstance(value, float) and math.isnan(value)):
        return "0.00"
    return f"{value:.2f}"


def format_price(value: Optional[float]) -> str:
    return f"${format_number(value)}"
