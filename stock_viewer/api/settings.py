"""
Settings API endpoints.

Provides endpoints for managing the viewer configuration stored in .env.
"""

from fastapi import APIRouter, HTTPException
from dotenv import set_key

from .. import config
from ..client import set_analytics_client
from ..models import Settings, SettingsUpdate, APIResponse

router = APIRouter()


@router.get("", response_model=Settings)
async def get_settings():
    """Get current viewer settings."""
    config.reload_settings()

    return Settings(
        analytics_api_url=config.get_analytics_api_url(),
        request_timeout_seconds=config.get_request_timeout(),
        default_period=config.get_default_period(),
    )


@router.put("", response_model=APIResponse)
async def update_settings(settings: SettingsUpdate):
    """Update viewer settings."""
    try:
        # Ensure .env exists
        if not config.ENV_PATH.exists():
            config.ENV_PATH.touch()

        if settings.analytics_api_url:
            set_key(str(config.ENV_PATH), "ANALYTICS_API_URL", settings.analytics_api_url)

        if settings.request_timeout_seconds is not None:
            set_key(str(config.ENV_PATH), "ANALYTICS_TIMEOUT_SECONDS",
                    str(settings.request_timeout_seconds))

        if settings.default_period:
            set_key(str(config.ENV_PATH), "DEFAULT_PERIOD", settings.default_period)

        # Reload environment and rebuild the client on next use
        config.reload_settings()
        set_analytics_client(None)

        return APIResponse(success=True, message="Settings saved successfully")

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save settings: {str(e)}")


@router.post("/reset", response_model=APIResponse)
async def reset_settings():
    """Reset all settings to defaults."""
    try:
        if not config.ENV_PATH.exists():
            config.ENV_PATH.touch()

        for key, value in config.DEFAULTS.items():
            set_key(str(config.ENV_PATH), key, value)

        config.reload_settings()
        set_analytics_client(None)

        return APIResponse(success=True, message="Settings reset to defaults")

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to reset settings: {str(e)}")
