# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# - settings.py: AppSettings and its redacted view
# - health.py: health status and check results
# =============================================================================

# -----------------------------------------------------------------------------
# Settings Models
# -----------------------------------------------------------------------------
from .settings import (
    AppSettings,
    DatabaseSettings,
    ExternalApiSettings,
    RedactedDatabaseSettings,
    RedactedExternalApiSettings,
    RedactedSecuritySettings,
    RedactedSettings,
    SecuritySettings,
)

# -----------------------------------------------------------------------------
# Health Models
# -----------------------------------------------------------------------------
from .health import HealthCheckResult, HealthReport, HealthStatus

__all__ = [
    # Settings
    "AppSettings",
    "DatabaseSettings",
    "ExternalApiSettings",
    "SecuritySettings",
    "RedactedSettings",
    "RedactedDatabaseSettings",
    "RedactedExternalApiSettings",
    "RedactedSecuritySettings",
    # Health
    "HealthCheckResult",
    "HealthReport",
    "HealthStatus",
]
