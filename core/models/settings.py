# =============================================================================
# core/models/settings.py - Application Settings Schemas
# =============================================================================
# These models define the typed projection of the merged configuration:
# - AppSettings: the "AppSettings" section with its three subsections
# - RedactedSettings: what the /config endpoint is allowed to show
#
# Configuration keys are PascalCase ("AppSettings:Database:CommandTimeout")
# while Python attributes are snake_case; the alias generator maps between
# them. All models are frozen: settings never change after startup.
# =============================================================================

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class _SettingsModel(BaseModel):
    """Base for every settings model: immutable, PascalCase configuration keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
    )


class DatabaseSettings(_SettingsModel):
    """Database connection settings (AppSettings:Database)."""

    # Required - no default, validated at startup
    connection_string: str = Field(
        default="",
        description="Database connection string"
    )

    command_timeout: int = Field(
        default=30,
        description="Command timeout in seconds"
    )

    max_retry_count: int = Field(
        default=3,
        description="Retries for transient failures"
    )


class ExternalApiSettings(_SettingsModel):
    """Downstream API settings (AppSettings:ExternalApi)."""

    # Required
    base_url: str = Field(
        default="",
        description="Absolute http(s) base URL of the external API"
    )

    # Required, secret
    api_key: str = Field(
        default="",
        description="API key sent to the external API"
    )

    timeout_seconds: int = Field(
        default=30,
        description="Request timeout in seconds"
    )


class SecuritySettings(_SettingsModel):
    """Token and CORS settings (AppSettings:Security)."""

    # Required, secret
    jwt_secret: str = Field(
        default="",
        description="Secret used to sign JWTs"
    )

    token_expiration_minutes: int = Field(
        default=60,
        description="Lifetime of issued tokens"
    )

    allowed_origins: tuple[str, ...] = Field(
        default=(),
        description="CORS origins allowed to call the API"
    )


class AppSettings(_SettingsModel):
    """
    Strongly-typed application settings.

    Bound once at startup from every configuration source and validated
    before any request is served. Required fields (environment,
    database connection string, external API base URL and key, JWT secret)
    have no meaningful default: they stay empty when unset and the
    validator rejects them.

    Example:
        settings = AppSettings(
            environment="Production",
            database=DatabaseSettings(connection_string="Server=..."),
        )
        settings.database.command_timeout  # 30
    """

    SECTION_NAME: ClassVar[str] = "AppSettings"

    # Required
    environment: str = Field(
        default="",
        description="Name of the environment the settings were resolved for"
    )

    application_insights_connection_string: str | None = Field(
        default=None,
        description="Telemetry connection string (optional)"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    external_api: ExternalApiSettings = Field(default_factory=ExternalApiSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    def to_redacted(self) -> "RedactedSettings":
        """
        Project the settings into their externally visible form.

        Secrets (API key, JWT secret) and connection strings, which embed
        credentials, are replaced by presence flags.
        """
        return RedactedSettings(
            environment=self.environment,
            application_insights_configured=bool(self.application_insights_connection_string),
            database=RedactedDatabaseSettings(
                connection_string_configured=bool(self.database.connection_string),
                command_timeout=self.database.command_timeout,
                max_retry_count=self.database.max_retry_count,
            ),
            external_api=RedactedExternalApiSettings(
                base_url=self.external_api.base_url,
                api_key_configured=bool(self.external_api.api_key),
                timeout_seconds=self.external_api.timeout_seconds,
            ),
            security=RedactedSecuritySettings(
                jwt_secret_configured=bool(self.security.jwt_secret),
                token_expiration_minutes=self.security.token_expiration_minutes,
                allowed_origins=list(self.security.allowed_origins),
            ),
        )


# =============================================================================
# Redacted Views
# =============================================================================

class RedactedDatabaseSettings(BaseModel):
    connection_string_configured: bool
    command_timeout: int
    max_retry_count: int


class RedactedExternalApiSettings(BaseModel):
    base_url: str
    api_key_configured: bool
    timeout_seconds: int


class RedactedSecuritySettings(BaseModel):
    jwt_secret_configured: bool
    token_expiration_minutes: int
    allowed_origins: list[str]


class RedactedSettings(BaseModel):
    """
    Settings safe to return from an HTTP endpoint.

    Example:
        {
            "environment": "Production",
            "application_insights_configured": true,
            "database": {"connection_string_configured": true, "command_timeout": 30, ...},
            "external_api": {"base_url": "https://api.example.com", "api_key_configured": true, ...},
            "security": {"jwt_secret_configured": true, "allowed_origins": [...], ...}
        }
    """

    environment: str
    application_insights_configured: bool
    database: RedactedDatabaseSettings
    external_api: RedactedExternalApiSettings
    security: RedactedSecuritySettings
