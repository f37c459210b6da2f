# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for the startup-validated state.
# Settings live on app.state and are read-only for the life of the process.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.exceptions import SettingsNotLoadedError
from core.models.settings import AppSettings
from core.services.health_service import HealthCheckService


def get_app_settings(request: Request) -> AppSettings:
    """
    Get the validated AppSettings for this process.

    Raises:
        SettingsNotLoadedError: If the app was built without settings
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise SettingsNotLoadedError()
    return settings


def get_health_service(request: Request) -> HealthCheckService:
    """Get the health check registry built at startup."""
    service = getattr(request.app.state, "health_service", None)
    if service is None:
        raise SettingsNotLoadedError()
    return service


# Type aliases for dependency injection
SettingsDep = Annotated[AppSettings, Depends(get_app_settings)]
HealthServiceDep = Annotated[HealthCheckService, Depends(get_health_service)]
