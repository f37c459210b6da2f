# =============================================================================
# core/services/health_service.py - Health Check Service
# =============================================================================
# Runs registered health checks and reports the worst status.
# A check that raises counts as Unhealthy; it never breaks the endpoint.
# =============================================================================

from __future__ import annotations

import logging
from typing import Callable

from core.configuration.validator import SettingsValidator
from core.models.health import HealthCheckResult, HealthReport, HealthStatus
from core.models.settings import AppSettings

logger = logging.getLogger(__name__)

HealthCheck = Callable[[], HealthCheckResult]


class HealthCheckService:
    """
    Registry of health checks.

    Example:
        service = HealthCheckService()
        service.register("configuration", configuration_check(settings))
        service.check_health().status  # HealthStatus.HEALTHY
    """

    def __init__(self):
        self._checks: dict[str, HealthCheck] = {}

    def register(self, name: str, check: HealthCheck) -> None:
        self._checks[name] = check

    def check_health(self) -> HealthReport:
        """Run every check; with no checks registered the service is Healthy."""
        results: list[HealthCheckResult] = []
        for name, check in self._checks.items():
            try:
                results.append(check())
            except Exception as e:
                logger.exception(f"Health check '{name}' raised")
                results.append(
                    HealthCheckResult(name=name, status=HealthStatus.UNHEALTHY, description=str(e))
                )

        status = min((r.status for r in results), key=lambda s: s.rank, default=HealthStatus.HEALTHY)
        return HealthReport(status=status, checks=results)


def configuration_check(settings: AppSettings, validator: SettingsValidator | None = None) -> HealthCheck:
    """Health check that re-validates the startup settings."""
    validator = validator or SettingsValidator()

    def check() -> HealthCheckResult:
        result = validator.validate(settings)
        if result.succeeded:
            return HealthCheckResult(name="configuration", status=HealthStatus.HEALTHY)
        return HealthCheckResult(
            name="configuration",
            status=HealthStatus.UNHEALTHY,
            description=result.message,
        )

    return check


def build_health_service(settings: AppSettings) -> HealthCheckService:
    """Health service with the built-in checks registered."""
    service = HealthCheckService()
    service.register("configuration", configuration_check(settings))
    return service
