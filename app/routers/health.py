# =============================================================================
# app/routers/health.py - Health Check Endpoint
# =============================================================================
# Provides the health check endpoint for monitoring and load balancers.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel

from app.dependencies import HealthServiceDep
from core.models.health import HealthStatus

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Health status name only - check details stay in the logs."""
    status: HealthStatus


# =============================================================================
# Endpoints
# =============================================================================

@router.api_route("/health", methods=["GET", "POST"], response_model=HealthResponse)
async def health_check(health_service: HealthServiceDep):
    """
    Health check endpoint.

    Returns Healthy, Degraded or Unhealthy, the worst status of all
    registered checks.
    """
    report = health_service.check_health()
    return HealthResponse(status=report.status)
