# =============================================================================
# core/configuration/errors.py - Configuration Pipeline Errors
# =============================================================================
# Fatal errors raised while resolving configuration at startup.
# Recoverable ones (missing optional file, unreachable vault) are logged by
# the builder and never raised out of it.
# =============================================================================

from lib.utils import ApplicationError


class ConfigurationSourceError(ApplicationError):
    """Raised when a source exists but cannot be parsed (e.g. malformed JSON)."""

    def __init__(self, source: str, error: str):
        super().__init__(
            message=f"Failed to load configuration source {source}: {error}",
            code="CONFIG_SOURCE_INVALID",
            suggestion="Fix the file so it is a JSON object, or remove it",
            details={"source": source, "error": error},
        )


class ConfigurationValidationError(ApplicationError):
    """Raised when the bound settings fail validation. Carries every violation."""

    def __init__(self, errors: list[str], section: str = "AppSettings"):
        self.errors = list(errors)
        super().__init__(
            message=f"Configuration validation failed for {section}: {', '.join(self.errors)}",
            code="CONFIG_VALIDATION_FAILED",
            suggestion=(
                "Set the missing values in appsettings.json, environment variables "
                "(e.g. AppSettings__Security__JwtSecret) or Key Vault"
            ),
            details={"section": section, "errors": self.errors},
        )


class StartupDeadlineExceededError(ApplicationError):
    """Raised when configuration resolution runs past the startup deadline."""

    def __init__(self, stage: str, elapsed_seconds: float, deadline_seconds: float):
        super().__init__(
            message=(
                f"Startup deadline of {deadline_seconds:.0f}s exceeded after stage "
                f"'{stage}' ({elapsed_seconds:.1f}s elapsed)"
            ),
            code="STARTUP_DEADLINE_EXCEEDED",
            suggestion="Check vault connectivity or raise STARTUP_DEADLINE_SECONDS",
            details={
                "stage": stage,
                "elapsed_seconds": elapsed_seconds,
                "deadline_seconds": deadline_seconds,
            },
        )


class StartupStateError(ApplicationError):
    """Raised when the startup sequence is run more than once."""

    def __init__(self, state: str):
        super().__init__(
            message=f"Startup sequence already ran (state: {state})",
            code="STARTUP_ALREADY_RAN",
            suggestion="Create a new StartupOrchestrator per process",
            details={"state": state},
        )
