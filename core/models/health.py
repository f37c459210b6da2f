# =============================================================================
# core/models/health.py - Health Check Schemas
# =============================================================================
# HealthStatus values are ordered from worst to best so the overall status
# of several checks is simply the worst one.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """
    Health of the service or of one component.

    - Unhealthy: the service cannot do its job
    - Degraded: the service works with reduced functionality
    - Healthy: everything is fine
    """
    UNHEALTHY = "Unhealthy"
    DEGRADED = "Degraded"
    HEALTHY = "Healthy"

    @property
    def rank(self) -> int:
        return list(HealthStatus).index(self)


class HealthCheckResult(BaseModel):
    """Result of a single named check."""
    name: str
    status: HealthStatus
    description: str | None = None


class HealthReport(BaseModel):
    """Aggregated result of every registered check."""
    status: HealthStatus
    checks: list[HealthCheckResult] = Field(default_factory=list)
