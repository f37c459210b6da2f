# =============================================================================
# app/config.py - Host Settings
# =============================================================================
# Process-level settings that tell the configuration pipeline WHERE to look:
# environment name, config directory, dev secrets file, timeouts, log level.
# The application settings themselves (AppSettings) come from the layered
# pipeline in core/configuration/.
#
# Usage:
#   from app.config import get_host_settings
#   host = get_host_settings()
#   print(host.environment)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in the working directory (if it exists)
# =============================================================================

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.configuration.builder import DEFAULT_ENVIRONMENT, SourceOptions


class HostSettings(BaseSettings):
    """
    Host settings loaded from environment variables.

    Uses pydantic-settings to:
    - Read the environment name the way Azure Functions sets it
    - Validate types and ranges before the pipeline runs
    - Provide defaults that work for a deployed function app
    """

    # -------------------------------------------------------------------------
    # Environment
    # -------------------------------------------------------------------------
    # Azure Functions sets AZURE_FUNCTIONS_ENVIRONMENT; ASPNETCORE_ENVIRONMENT
    # is honoured for apps sharing settings with .NET workers

    environment: str = Field(
        default=DEFAULT_ENVIRONMENT,
        validation_alias=AliasChoices(
            "AZURE_FUNCTIONS_ENVIRONMENT",
            "ASPNETCORE_ENVIRONMENT",
            "ENVIRONMENT",
        ),
        description="Environment name (Development, Staging, Production)"
    )

    # -------------------------------------------------------------------------
    # Configuration Files
    # -------------------------------------------------------------------------

    config_dir: Path = Field(
        default=Path("."),
        validation_alias="CONFIG_DIR",
        description="Directory containing appsettings.json files"
    )

    config_basename: str = Field(
        default="appsettings",
        validation_alias="CONFIG_BASENAME",
        description="File name stem of the settings files"
    )

    dev_secrets_file: Path = Field(
        default=Path("~/.config/function-app/secrets.json"),
        validation_alias="DEV_SECRETS_FILE",
        description="Developer-local secrets file (read in Development only)"
    )

    # -------------------------------------------------------------------------
    # Timeouts
    # -------------------------------------------------------------------------

    vault_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="VAULT_TIMEOUT_SECONDS",
        description="Key Vault fetch timeout when the external API timeout is unset"
    )

    startup_deadline_seconds: float = Field(
        default=120.0,
        gt=0,
        validation_alias="STARTUP_DEADLINE_SECONDS",
        description="Abort startup if configuration takes longer than this"
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root log level"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    def source_options(self) -> SourceOptions:
        """Options for the layered source builder."""
        return SourceOptions(
            environment=self.environment,
            config_dir=self.config_dir,
            base_name=self.config_basename,
            dev_secrets_file=self.dev_secrets_file,
            vault_timeout_seconds=self.vault_timeout_seconds,
        )


@lru_cache
def get_host_settings() -> HostSettings:
    """
    Get cached HostSettings instance.

    Using lru_cache ensures we only parse .env and validate once.
    """
    return HostSettings()
