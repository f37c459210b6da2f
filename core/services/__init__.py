# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .health_service import HealthCheckService, build_health_service, configuration_check

__all__ = [
    "HealthCheckService",
    "build_health_service",
    "configuration_check",
]
