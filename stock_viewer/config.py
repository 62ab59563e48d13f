"""
Viewer configuration.

Values are read from the environment, with a ``.env`` file at the project
root loaded first. The settings API writes back to the same file.
"""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

# Path to .env file
ENV_PATH = Path(__file__).parent.parent / ".env"

DEFAULTS: Dict[str, str] = {
    "ANALYTICS_API_URL": "http://localhost:8000",
    "ANALYTICS_TIMEOUT_SECONDS": "30",
    "DEFAULT_PERIOD": "1mo",
}

load_dotenv(ENV_PATH)


def get_analytics_api_url() -> str:
    """Base origin of the analytics service, without a trailing slash."""
    url = os.getenv("ANALYTICS_API_URL") or DEFAULTS["ANALYTICS_API_URL"]
    return url.rstrip("/")


def get_request_timeout() -> float:
    raw = os.getenv("ANALYTICS_TIMEOUT_SECONDS") or DEFAULTS["ANALYTICS_TIMEOUT_SECONDS"]
    try:
        return float(raw)
    except ValueError:
        return float(DEFAULTS["ANALYTICS_TIMEOUT_SECONDS"])


def get_default_period() -> str:
    return os.getenv("DEFAULT_PERIOD") or DEFAULTS["DEFAULT_PERIOD"]


def reload_settings() -> None:
    """Re-read the .env file, letting it override the process environment."""
    load_dotenv(ENV_PATH, override=True)
