# =============================================================================
# app/routers/settings.py - Configuration Endpoint
# =============================================================================
# Returns the resolved settings with every secret replaced by a presence flag.
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import SettingsDep
from core.models.settings import RedactedSettings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/config", response_model=RedactedSettings)
async def get_configuration(settings: SettingsDep):
    """
    Resolved configuration, redacted.

    API key, JWT secret and connection strings are never returned, only
    whether they are configured.
    """
    logger.info("Configuration endpoint processed a request.")
    logger.info(f"Environment: {settings.environment}")
    return settings.to_redacted()
