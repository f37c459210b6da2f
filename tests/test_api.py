# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# Tests for the FastAPI app built by app/main.py:
# - GET /config returns settings with secrets redacted
# - GET|POST /health returns the aggregated health status
# - GET / lists the endpoints
# - handlers fail with 503 when settings were never loaded
#
# Apps are built from ready-made settings so startup never runs here.
#
# Run with: pytest tests/test_api.py -v
# =============================================================================

import pytest
from fastapi.testclient import TestClient

from app.main import API_TITLE, create_app
from core.models.health import HealthCheckResult, HealthStatus
from core.models.settings import AppSettings
from core.services.health_service import HealthCheckService, configuration_check
from tests.conftest import API_KEY, CONNECTION_STRING, JWT_SECRET


@pytest.fixture
def client(valid_settings):
    return TestClient(create_app(valid_settings))


# =============================================================================
# /config
# =============================================================================

class TestConfigEndpoint:
    """The configuration endpoint never returns a secret value."""

    def test_returns_redacted_settings(self, client):
        response = client.get("/config")

        assert response.status_code == 200
        data = response.json()
        assert data["environment"] == "Production"
        assert data["application_insights_configured"] is True
        assert data["database"] == {
            "connection_string_configured": True,
            "command_timeout": 30,
            "max_retry_count": 3,
        }
        assert data["external_api"] == {
            "base_url": "https://api.example.com",
            "api_key_configured": True,
            "timeout_seconds": 30,
        }
        assert data["security"] == {
            "jwt_secret_configured": True,
            "token_expiration_minutes": 60,
            "allowed_origins": ["https://app.example.com"],
        }

    def test_secret_values_never_in_body(self, client):
        body = client.get("/config").text

        for secret in (API_KEY, JWT_SECRET, CONNECTION_STRING, "InstrumentationKey=abc"):
            assert secret not in body

    def test_unset_secrets_reported_as_not_configured(self):
        client = TestClient(create_app(AppSettings(environment="Staging")))

        data = client.get("/config").json()

        assert data["application_insights_configured"] is False
        assert data["database"]["connection_string_configured"] is False
        assert data["external_api"]["api_key_configured"] is False
        assert data["security"]["jwt_secret_configured"] is False

    def test_settings_not_loaded_returns_503(self, valid_settings):
        app = create_app(valid_settings)
        app.state.settings = None

        response = TestClient(app).get("/config")

        assert response.status_code == 503
        assert response.json()["code"] == "SETTINGS_NOT_LOADED"


# =============================================================================
# /health
# =============================================================================

class TestHealthEndpoint:
    """Health reports only the status name."""

    @pytest.mark.parametrize("method", ["GET", "POST"])
    def test_healthy(self, client, method):
        response = client.request(method, "/health")

        assert response.status_code == 200
        assert response.json() == {"status": "Healthy"}

    def test_invalid_settings_unhealthy(self):
        client = TestClient(create_app(AppSettings()))

        assert client.get("/health").json() == {"status": "Unhealthy"}

    def test_worst_check_wins(self, client):
        service = HealthCheckService()
        service.register("ok", lambda: HealthCheckResult(name="ok", status=HealthStatus.HEALTHY))
        service.register("slow", lambda: HealthCheckResult(name="slow", status=HealthStatus.DEGRADED))
        client.app.state.health_service = service

        assert client.get("/health").json() == {"status": "Degraded"}

    def test_cors_headers_for_allowed_origin(self, client):
        response = client.get("/health", headers={"Origin": "https://app.example.com"})

        assert response.headers["access-control-allow-origin"] == "https://app.example.com"


class TestHealthCheckService:
    """Aggregation rules of the health registry."""

    def test_no_checks_is_healthy(self):
        assert HealthCheckService().check_health().status is HealthStatus.HEALTHY

    def test_raising_check_is_unhealthy(self):
        def broken() -> HealthCheckResult:
            raise RuntimeError("database unreachable")

        service = HealthCheckService()
        service.register("database", broken)

        report = service.check_health()

        assert report.status is HealthStatus.UNHEALTHY
        assert report.checks[0].name == "database"
        assert report.checks[0].description == "database unreachable"

    def test_configuration_check_reports_validation_message(self):
        result = configuration_check(AppSettings(environment="Production"))()

        assert result.status is HealthStatus.UNHEALTHY
        assert "JWT secret is required" in result.description


# =============================================================================
# /
# =============================================================================

class TestRootEndpoint:
    def test_lists_endpoints(self, client):
        data = client.get("/").json()

        assert data["message"] == API_TITLE
        assert data["endpoints"] == {"config": "/config", "health": "/health"}
        assert "timestamp" in data
