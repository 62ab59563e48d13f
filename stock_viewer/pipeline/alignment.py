"""
Alignment of indicator series against the date axis.

The analytics API returns one list per series (price, moving averages, RSI,
VWAP, volume) next to a shared ``dates`` list. Nothing guarantees the lists
have equal length, and individual elements may be ``null``. The date axis is
authoritative: every chart gets exactly ``len(dates)`` rows, in input order,
and any value that is absent defaults to ``0``.

Only absence triggers the default. A value of ``0`` sent by the API is kept
as ``0``.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..models import Timeseries

MISSING_VALUE = 0


# Output column -> timeseries field, plus the fields a chart cannot do without.
CHART_LAYOUTS: Dict[str, Dict[str, Any]] = {
    "moving_averages": {
        "columns": {"price": "price", "ma50": "fifty_ma", "ma200": "twohundred_ma"},
        "required": ("dates", "price"),
    },
    "rsi": {
        "columns": {"rsi": "rsi"},
        "required": ("dates", "rsi"),
    },
    "vwap": {
        "columns": {"price": "price", "vwap": "vwap", "volume": "volume"},
        "required": ("dates", "vwap", "price"),
    },
}


def value_at(series: Optional[Sequence[Optional[float]]], index: int) -> float:
    """Return ``series[index]``, or 0 if the series, index or value is absent."""
    if series is None or index < 0 or index >= len(series):
        return MISSING_VALUE
    value = series[index]
    if value is None:
        return MISSING_VALUE
    return value


def align_series(dates: Sequence[str],
                 columns: Mapping[str, Optional[Sequence[Optional[float]]]]) -> List[Dict[str, Any]]:
    """Zip ``dates`` with each named series into one record per date.

    Args:
        dates: The date axis; its length fixes the number of rows
        columns: Output field name to series (the series may be None)

    Returns:
        List of dicts with a ``date`` key plus one key per column
    """
    rows = []
    for i, date in enumerate(dates):
        row = {"date": date}
        for name, series in columns.items():
            row[name] = value_at(series, i)
        rows.append(row)
    return rows


def align_chart(timeseries: Optional[Timeseries], chart: str) -> Optional[List[Dict[str, Any]]]:
    """Align the series used by one chart.

    Returns None when the timeseries or any of the chart's required series is
    missing, meaning the chart should not be shown at all.
    """
    layout = CHART_LAYOUTS[chart]
    if timeseries is None:
        return None

    for field in layout["required"]:
        if getattr(timeseries, field, None) is None:
            return None

    columns = {
        name: getattr(timeseries, field, None)
        for name, field in layout["columns"].items()
    }
    return align_series(timeseries.dates, columns)
