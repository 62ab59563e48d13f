# Stock Viewer - Charts Package
"""
Chart image rendering for indicator panels.

- Moving averages chart
- RSI indicator chart
- VWAP and volume chart
"""
