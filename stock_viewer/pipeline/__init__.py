# Stock Viewer - Pipeline Package
"""
Indicator presentation pipeline.

- alignment: zip parallel indicator series against the date axis
- classification: map summary flags to discrete indicator states
- formatting: fixed two-decimal display of scalars
- presenter: assemble aligned rows and states into chart panels
"""

from .alignment import align_chart, align_series, value_at
from .classification import classify_rsi, classify_trend, classify_vwap
from .formatting import format_number, format_price
from .presenter import (
    build_dashboard,
    build_header,
    build_moving_average_panel,
    build_rsi_panel,
    build_vwap_panel,
)

__all__ = [
    "align_chart",
    "align_series",
    "value_at",
    "classify_rsi",
    "classify_trend",
    "classify_vwap",
    "format_number",
    "format_price",
    "build_dashboard",
    "build_header",
    "build_moving_average_panel",
    "build_rsi_panel",
    "build_vwap_panel",
]
