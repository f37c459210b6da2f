# =============================================================================
# app/main.py - FastAPI Application Factory
# =============================================================================
# Builds the ASGI app around settings that were validated at startup.
# Configuration is resolved BEFORE the app exists, so an invalid
# configuration means the process never serves a request.
#
# Usage:
#   uvicorn app.main:create_app --factory
#   (or via function_app.py on Azure Functions)
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.exceptions import FunctionAppException, function_app_exception_handler
from app.routers import health, settings as settings_router
from core.models.settings import AppSettings
from core.services.health_service import build_health_service

logger = logging.getLogger(__name__)

API_TITLE = "Configuration Demo Function App"


def create_app(app_settings: AppSettings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        app_settings: Validated settings. When omitted the full startup
            sequence runs first and the process exits if it fails.

    Returns:
        FastAPI app with settings and health checks on app.state
    """
    if app_settings is None:
        from app.bootstrap import bootstrap

        app_settings = bootstrap()

    app = FastAPI(
        title=API_TITLE,
        description="Exposes the resolved (redacted) configuration and a health check.",
        version="1.0.0",
        openapi_tags=[
            {
                "name": "Configuration",
                "description": "Resolved application settings, secrets redacted",
            },
            {
                "name": "Health",
                "description": "Service health status",
            },
        ],
    )

    # Shared read-only state for every request
    app.state.settings = app_settings
    app.state.health_service = build_health_service(app_settings)

    # =========================================================================
    # Middleware
    # =========================================================================

    if app_settings.security.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(app_settings.security.allowed_origins),
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(FunctionAppException)
    async def handle_function_app_exception(request: Request, exc: FunctionAppException):
        """Handle custom function app exceptions."""
        return await function_app_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        )

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(settings_router.router, tags=["Configuration"])
    app.include_router(health.router, tags=["Health"])

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint - returns service info.
        """
        logger.info("Root function processed a request.")
        return {
            "message": API_TITLE,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "config": "/config",
                "health": "/health",
            },
        }

    logger.info(f"{API_TITLE} ready for environment '{app_settings.environment}'")
    return app
