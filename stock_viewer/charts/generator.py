# Stock Viewer - Chart Generator
"""
Render indicator panels as chart images using matplotlib.

Charts include:
- Price with 50-day and 200-day moving averages
- RSI with overbought/oversold guide lines
- Price and VWAP with volume bars
"""

import io
import base64
from typing import Dict, List, Sequence
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..models import Dashboard, MovingAveragePanel, RsiPanel, VwapPanel


class ChartGenerator:
    """Generate indicator chart images."""

    def __init__(self):
        # Style settings
        plt.style.use('seaborn-v0_8-whitegrid')
        self.colors = {
            'price': '#2563eb',   # Blue
            'ma_50': '#16a34a',   # Green
            'ma_200': '#dc2626',  # Red
            'rsi': '#8b5cf6',     # Purple
            'vwap': '#16a34a',    # Green
            'volume': '#6b7280',  # Gray
        }

    def _encode(self, fig: plt.Figure) -> str:
        """Return the figure as a base64 PNG data URL and close it."""
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=150, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        buf.seek(0)
        img_base64 = base64.b64encode(buf.read()).decode('utf-8')
        plt.close(fig)
        return f"data:image/png;base64,{img_base64}"

    def _x_axis(self, dates: Sequence[str]) -> List:
        """Parse dates for the x-axis, falling back to row positions.

        Rows keep their input order, so the fallback preserves the layout
        even when the service sends labels that are not dates.
        """
        if not dates:
            return []
        parsed = pd.to_datetime(pd.Series(list(dates)), errors='coerce')
        if parsed.isna().any():
            return list(range(len(dates)))
        return list(parsed)

    def _placeholder(self, ax, message: str):
        ax.text(0.5, 0.5, message, ha='center', va='center', fontsize=14)

    def _finish(self, fig: plt.Figure, ax, title: str):
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_xlabel('Date', fontsize=10)
        ax.grid(True, alpha=0.3)
        fig.autofmt_xdate(rotation=45)
        plt.tight_layout()

    def generate_moving_average_chart(self, panel: MovingAveragePanel,
                                      ticker: str = "STOCK") -> str:
        """Generate price chart with 50-day and 200-day moving averages.

        Args:
            panel: Moving averages panel with aligned rows
            ticker: Stock ticker symbol

        Returns:
            Base64 encoded image
        """
        fig, ax = plt.subplots(figsize=(12, 6))
        title = f'{ticker} - {panel.title}'

        if not panel.rows:
            self._placeholder(ax, 'No price data available')
            ax.set_title(title)
            return self._encode(fig)

        x_data = self._x_axis([row.date for row in panel.rows])
        ax.plot(x_data, [row.price for row in panel.rows],
                color=self.colors['price'], linewidth=1.5, label='Price')
        ax.plot(x_data, [row.ma50 for row in panel.rows],
                color=self.colors['ma_50'], linewidth=1, label='50 MA')
        ax.plot(x_data, [row.ma200 for row in panel.rows],
                color=self.colors['ma_200'], linewidth=1, label='200 MA')

        ax.set_ylabel('Price ($)', fontsize=10)
        ax.legend(loc='upper left', framealpha=0.9)
        self._finish(fig, ax, title)
        return self._encode(fig)

    def generate_rsi_chart(self, panel: RsiPanel, ticker: str = "STOCK") -> str:
        """Generate RSI indicator chart.

        Args:
            panel: RSI panel with aligned rows
            ticker: Stock ticker symbol

        Returns:
            Base64 encoded image
        """
        fig, ax = plt.subplots(figsize=(12, 4))
        title = f'{ticker} - {panel.title}'

        if not panel.rows:
            self._placeholder(ax, 'No RSI data available')
            ax.set_title(title)
            return self._encode(fig)

        x_data = self._x_axis([row.date for row in panel.rows])
        rsi = np.array([row.rsi for row in panel.rows], dtype=float)

        ax.plot(x_data, rsi, color=self.colors['rsi'], linewidth=1.5, label='RSI')

        # Overbought/oversold levels
        ax.axhline(y=70, color='red', linestyle='--', alpha=0.5, label='Overbought (70)')
        ax.axhline(y=30, color='green', linestyle='--', alpha=0.5, label='Oversold (30)')
        ax.fill_between(x_data, 70, np.maximum(rsi, 70), color='red', alpha=0.1)
        ax.fill_between(x_data, 30, np.minimum(rsi, 30), color='green', alpha=0.1)

        ax.set_ylabel('RSI', fontsize=10)
        ax.set_ylim(0, 100)
        ax.legend(loc='upper right', framealpha=0.9, fontsize=8)
        self._finish(fig, ax, title)
        return self._encode(fig)

    def generate_vwap_chart(self, panel: VwapPanel, ticker: str = "STOCK") -> str:
        """Generate price and VWAP chart with volume bars on a second axis.

        Args:
            panel: VWAP panel with aligned rows
            ticker: Stock ticker symbol

        Returns:
            Base64 encoded image
        """
        fig, ax = plt.subplots(figsize=(12, 6))
        title = f'{ticker} - {panel.title}'

        if not panel.rows:
            self._placeholder(ax, 'No VWAP data available')
            ax.set_title(title)
            return self._encode(fig)

        x_data = self._x_axis([row.date for row in panel.rows])

        ax.plot(x_data, [row.price for row in panel.rows],
                color=self.colors['price'], linewidth=1.5, label='Price')
        ax.plot(x_data, [row.vwap for row in panel.rows],
                color=self.colors['vwap'], linewidth=1.5, label='VWAP')
        ax.set_ylabel('Price ($)', fontsize=10)

        volume_ax = ax.twinx()
        volume_ax.bar(x_data, np.array([row.volume for row in panel.rows], dtype=float),
                      color=self.colors['volume'], alpha=0.3, label='Volume')
        volume_ax.set_ylabel('Volume', fontsize=10)
        volume_ax.yaxis.set_major_formatter(plt.FuncFormatter(
            lambda x, p: f'{x/1e6:.1f}M' if x >= 1e6 else f'{x/1e3:.0f}K'))

        lines, labels = ax.get_legend_handles_labels()
        bars, bar_labels = volume_ax.get_legend_handles_labels()
        ax.legend(lines + bars, labels + bar_labels, loc='upper left', framealpha=0.9)

        self._finish(fig, ax, title)
        return self._encode(fig)

    def generate_all_charts(self, dashboard: Dashboard) -> Dict[str, str]:
        """Generate images for every panel present on the dashboard.

        Args:
            dashboard: Dashboard built from one analysis document

        Returns:
            Dictionary of chart names to base64 images
        """
        charts = {}
        if dashboard.moving_averages is not None:
            charts['moving_averages'] = self.generate_moving_average_chart(
                dashboard.moving_averages, dashboard.ticker)
        if dashboard.rsi is not None:
            charts['rsi'] = self.generate_rsi_chart(dashboard.rsi, dashboard.ticker)
        if dashboard.vwap is not None:
            charts['vwap'] = self.generate_vwap_chart(dashboard.vwap, dashboard.ticker)
        return charts


# Global instance
chart_generator = ChartGenerator()
