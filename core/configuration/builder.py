# =============================================================================
# core/configuration/builder.py - Layered Source Builder
# =============================================================================
# Builds the ordered list of configuration sources for an environment.
# Precedence, lowest to highest:
#   1. appsettings.json                      (optional)
#   2. appsettings.<Environment>.json        (optional)
#   3. developer secrets file                (Development only)
#   4. process environment variables
#   5. Azure Key Vault                       (every environment but Development)
#
# The vault URL is read from KeyVault:Url after merging layers 1-4.
# Vault outcomes are explicit (VaultStatus):
#   SKIPPED         environment is Development
#   NOT_CONFIGURED  no KeyVault:Url - silent no-op
#   FAILED          configured but unreachable - warning, startup continues
#   LOADED          secrets added as the highest-precedence source
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping

from core.configuration.binder import RawConfigMap, coerce_value, merge_sources
from core.configuration.sources import (
    ConfigSource,
    EnvironmentVariablesSource,
    InMemorySource,
    JsonFileSource,
    SourceKind,
)
from lib.key_vault import KeyVaultSecretClient, SecretFetcher, VaultUnavailableError

logger = logging.getLogger(__name__)

# Local development environment - the only one that reads developer secrets
# and the only one that never talks to the vault
DEVELOPMENT_ENVIRONMENT = "Development"
DEFAULT_ENVIRONMENT = "Production"

VAULT_URL_KEY = "KeyVault:Url"
# The vault fetch inherits the external API timeout when it is configured
VAULT_TIMEOUT_KEY = "AppSettings:ExternalApi:TimeoutSeconds"

# (vault_url, timeout_seconds) -> fetcher
VaultClientFactory = Callable[[str, float], SecretFetcher]


class VaultStatus(str, Enum):
    SKIPPED = "skipped"
    NOT_CONFIGURED = "not_configured"
    FAILED = "failed"
    LOADED = "loaded"


def is_development(environment: str) -> bool:
    """True for the local development environment (case-insensitive)."""
    return environment.strip().casefold() == DEVELOPMENT_ENVIRONMENT.casefold()


@dataclass(frozen=True)
class SourceOptions:
    """
    Inputs for building the source list.

    Attributes:
        environment: Active environment name ("Development", "Staging", ...)
        config_dir: Directory holding the appsettings files
        base_name: File name stem of the base file ("appsettings")
        extension: File extension of the settings files
        dev_secrets_file: Developer-local secrets file, read in Development only
        environ: Environment variables (None = os.environ)
        vault_timeout_seconds: Vault timeout when the external API timeout is unset
    """

    environment: str = DEFAULT_ENVIRONMENT
    config_dir: Path = Path(".")
    base_name: str = "appsettings"
    extension: str = ".json"
    dev_secrets_file: Path | None = None
    environ: Mapping[str, str] | None = None
    vault_timeout_seconds: float = 30.0


@dataclass
class LayeredSources:
    """Result of the build stage: ordered sources plus the vault outcome."""

    environment: str
    sources: list[ConfigSource] = field(default_factory=list)
    vault_status: VaultStatus = VaultStatus.SKIPPED
    warnings: list[str] = field(default_factory=list)

    def kinds(self) -> list[SourceKind]:
        return [source.kind for source in self.sources]

    def merge(self) -> RawConfigMap:
        """Merge every source in precedence order."""
        return merge_sources(self.sources)


class LayeredSourceBuilder:
    """
    Assembles configuration sources for one environment.

    Example:
        layered = LayeredSourceBuilder(SourceOptions(environment="Staging")).build()
        layered.kinds()
        # [FILE, ENVIRONMENT_FILE, ENV_VARS, VAULT]  (VAULT only if it loaded)
    """

    def __init__(
        self,
        options: SourceOptions,
        vault_client_factory: VaultClientFactory = KeyVaultSecretClient,
    ):
        self.options = options
        self.vault_client_factory = vault_client_factory

    # -------------------------------------------------------------------------
    # Local layers
    # -------------------------------------------------------------------------

    def _file_sources(self) -> list[ConfigSource]:
        opts = self.options
        config_dir = Path(opts.config_dir)
        sources: list[ConfigSource] = [
            JsonFileSource(config_dir / f"{opts.base_name}{opts.extension}", SourceKind.FILE),
        ]
        if opts.environment:
            sources.append(
                JsonFileSource(
                    config_dir / f"{opts.base_name}.{opts.environment}{opts.extension}",
                    SourceKind.ENVIRONMENT_FILE,
                )
            )
        return sources

    def _local_sources(self) -> list[ConfigSource]:
        sources = self._file_sources()

        if is_development(self.options.environment) and self.options.dev_secrets_file:
            sources.append(JsonFileSource(Path(self.options.dev_secrets_file).expanduser(), SourceKind.DEV_SECRETS))

        sources.append(EnvironmentVariablesSource(self.options.environ))
        return sources

    # -------------------------------------------------------------------------
    # Vault layer
    # -------------------------------------------------------------------------

    def _vault_timeout(self, intermediate: RawConfigMap, time_budget: float | None) -> float:
        timeout = self.options.vault_timeout_seconds
        configured = intermediate.get(VAULT_TIMEOUT_KEY)
        if configured:
            try:
                seconds = coerce_value(configured, int)
            except ValueError:
                seconds = 0
            if seconds > 0:
                timeout = float(seconds)
        # Never wait on the vault past the startup deadline
        if time_budget is not None:
            timeout = min(timeout, max(time_budget, 0.0))
        return timeout

    def _vault_source(
        self,
        layered: LayeredSources,
        intermediate: RawConfigMap,
        time_budget: float | None,
    ) -> ConfigSource | None:
        vault_url = (intermediate.get(VAULT_URL_KEY) or "").strip()
        if not vault_url:
            logger.debug("KeyVault:Url not configured, skipping Key Vault")
            layered.vault_status = VaultStatus.NOT_CONFIGURED
            return None

        timeout = self._vault_timeout(intermediate, time_budget)
        try:
            secrets = self.vault_client_factory(vault_url, timeout).fetch_secrets()
        except VaultUnavailableError as e:
            warning = f"Warning: Could not connect to Key Vault: {e.message}"
            logger.warning(warning)
            layered.warnings.append(warning)
            layered.vault_status = VaultStatus.FAILED
            return None

        layered.vault_status = VaultStatus.LOADED
        return InMemorySource(vault_url, secrets, SourceKind.VAULT)

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    def build(self, time_budget: float | None = None) -> LayeredSources:
        """
        Build the ordered source list.

        Args:
            time_budget: Seconds left before the startup deadline; caps the
                vault timeout (None = no cap)

        Never raises for an unavailable vault; raises ConfigurationSourceError
        only for a present but malformed file.
        """
        environment = self.options.environment
        layered = LayeredSources(environment=environment)
        layered.sources = self._local_sources()

        if is_development(environment):
            layered.vault_status = VaultStatus.SKIPPED
        else:
            vault = self._vault_source(layered, merge_sources(layered.sources), time_budget)
            if vault is not None:
                layered.sources.append(vault)

        for priority, source in enumerate(layered.sources):
            source.priority = priority

        logger.info(
            f"Configuration sources for {environment}: "
            f"{[source.kind.value for source in layered.sources]} "
            f"(vault: {layered.vault_status.value})"
        )
        return layered
