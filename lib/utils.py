# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - ApplicationError: base class for every error raised by the config pipeline
# - join_key: helper for hierarchical "Section:Field" keys
# =============================================================================

from typing import Any

# Hierarchy separator used in merged configuration keys
KEY_DELIMITER = ":"


# =============================================================================
# Key Utilities
# =============================================================================

def join_key(*parts: str) -> str:
    """
    Join key segments into a hierarchical configuration key.

    Empty segments are dropped so callers can pass an optional prefix.

    Example:
        join_key("AppSettings", "Database", "ConnectionString")
        # "AppSettings:Database:ConnectionString"
    """
    return KEY_DELIMITER.join(part for part in parts if part)


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class VaultUnavailableError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="VAULT_UNAVAILABLE", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logs and API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
