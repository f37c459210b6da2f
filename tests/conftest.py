# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Fixtures shared by the configuration pipeline and API tests:
# - required_env: environment variables that satisfy every required field
# - write_json: helper that writes appsettings files into a temp directory
# - FakeVault / FailingVault: stand-ins for the Key Vault adapter
# =============================================================================

import json
from pathlib import Path

import pytest

from core.models.settings import (
    AppSettings,
    DatabaseSettings,
    ExternalApiSettings,
    SecuritySettings,
)
from lib.key_vault import VaultUnavailableError

API_KEY = "api-key-7f3c9e"
JWT_SECRET = "jwt-secret-1b2d4f"
CONNECTION_STRING = "Server=db;Database=app;User Id=app;Password=p4ss"


# =============================================================================
# Fake Vault Clients
# =============================================================================

class FakeVault:
    """Vault client factory returning fixed secrets and recording calls."""

    def __init__(self, secrets: dict[str, str] | None = None):
        self.secrets = secrets or {}
        self.calls: list[tuple[str, float]] = []

    def __call__(self, vault_url: str, timeout_seconds: float) -> "FakeVault":
        self.calls.append((vault_url, timeout_seconds))
        return self

    def fetch_secrets(self) -> dict[str, str]:
        return dict(self.secrets)


class FailingVault(FakeVault):
    """Vault client factory whose fetch always fails as unreachable."""

    def fetch_secrets(self) -> dict[str, str]:
        raise VaultUnavailableError(self.calls[-1][0], "connection refused")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def required_env():
    """Environment variables supplying every required field, nothing else."""
    return {
        "AppSettings__Environment": "Production",
        "AppSettings__Database__ConnectionString": CONNECTION_STRING,
        "AppSettings__ExternalApi__BaseUrl": "https://api.example.com",
        "AppSettings__ExternalApi__ApiKey": API_KEY,
        "AppSettings__Security__JwtSecret": JWT_SECRET,
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to tmp_path/<name> and return its path."""

    def _write(name: str, document) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def valid_settings():
    """Fully valid AppSettings built directly."""
    return AppSettings(
        environment="Production",
        application_insights_connection_string="InstrumentationKey=abc",
        database=DatabaseSettings(connection_string=CONNECTION_STRING),
        external_api=ExternalApiSettings(base_url="https://api.example.com", api_key=API_KEY),
        security=SecuritySettings(
            jwt_secret=JWT_SECRET,
            allowed_origins=("https://app.example.com",),
        ),
    )
