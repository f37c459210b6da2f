# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the HTTP layer.
# Startup errors never reach clients (the process does not start); these
# cover what can still go wrong while serving a request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class FunctionAppException(Exception):
    """
    Base exception for HTTP handlers.

    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "FUNCTION_APP_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


class SettingsNotLoadedError(FunctionAppException):
    """Raised when a handler runs on an app that has no validated settings."""

    def __init__(self):
        super().__init__(
            message="Application settings are not loaded",
            code="SETTINGS_NOT_LOADED",
            status_code=503,
            suggestion="Create the app with create_app() so startup validation runs first",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def function_app_exception_handler(
    request: Request,
    exc: FunctionAppException
) -> JSONResponse:
    """
    Convert FunctionAppException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
