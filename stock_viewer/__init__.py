# Stock Viewer - Main Package
"""
Stock Viewer: technical indicator dashboard for a remote analytics API.

This package provides:
- Analytics client: fetches precomputed indicator documents over HTTP
- Pipeline: aligns indicator series and classifies indicator states
- Charts: matplotlib rendering of the indicator panels
- Web Dashboard: FastAPI-based web interface
"""

__version__ = "1.0.0"
