# =============================================================================
# core/configuration/startup.py - Startup Orchestrator
# =============================================================================
# Runs the configuration pipeline exactly once:
#
#   UNINITIALIZED -> SOURCES_BUILT -> BOUND -> VALIDATED
#                                          \-> VALIDATION_FAILED (terminal)
#
# On success the validated AppSettings are returned and never mutated.
# On failure every violation is logged and ConfigurationValidationError is
# raised; turning that into a process exit is the host's job
# (app/bootstrap.py).
# =============================================================================

from __future__ import annotations

import logging
import time
from enum import Enum

from core.configuration.binder import BindResult, RawConfigMap, bind_settings
from core.configuration.builder import LayeredSourceBuilder, LayeredSources, SourceOptions, VaultClientFactory
from core.configuration.errors import StartupDeadlineExceededError, StartupStateError
from core.configuration.validator import SettingsValidator, ValidationResult
from core.models.settings import AppSettings
from lib.key_vault import KeyVaultSecretClient

logger = logging.getLogger(__name__)


class StartupState(str, Enum):
    UNINITIALIZED = "uninitialized"
    SOURCES_BUILT = "sources_built"
    BOUND = "bound"
    VALIDATED = "validated"
    VALIDATION_FAILED = "validation_failed"


class StartupOrchestrator:
    """
    Sequences build sources -> bind -> validate, once per process.

    Intermediate results stay available as attributes (layered, raw,
    bind_result, validation) for diagnostics and tests.

    Example:
        orchestrator = StartupOrchestrator(SourceOptions(environment="Production"))
        settings = orchestrator.run()  # raises ConfigurationValidationError on failure
    """

    def __init__(
        self,
        options: SourceOptions,
        *,
        vault_client_factory: VaultClientFactory = KeyVaultSecretClient,
        validator: SettingsValidator | None = None,
        deadline_seconds: float | None = None,
    ):
        self.options = options
        self.builder = LayeredSourceBuilder(options, vault_client_factory)
        self.validator = validator or SettingsValidator()
        self.deadline_seconds = deadline_seconds

        self.state = StartupState.UNINITIALIZED
        self.layered: LayeredSources | None = None
        self.raw: RawConfigMap | None = None
        self.bind_result: BindResult | None = None
        self.validation: ValidationResult | None = None
        self.settings: AppSettings | None = None
        self._started_at = 0.0

    def _remaining(self) -> float | None:
        if self.deadline_seconds is None:
            return None
        return self.deadline_seconds - (time.monotonic() - self._started_at)

    def _check_deadline(self, stage: str) -> None:
        if self.deadline_seconds is None:
            return
        elapsed = time.monotonic() - self._started_at
        if elapsed > self.deadline_seconds:
            raise StartupDeadlineExceededError(stage, elapsed, self.deadline_seconds)

    def run(self) -> AppSettings:
        """
        Run the whole pipeline.

        Returns:
            Validated, immutable AppSettings

        Raises:
            ConfigurationValidationError: Validation failed (all violations logged)
            ConfigurationSourceError: A configuration file is malformed
            StartupDeadlineExceededError: The pipeline ran past its deadline
            StartupStateError: run() was already called
        """
        if self.state is not StartupState.UNINITIALIZED:
            raise StartupStateError(self.state.value)

        self._started_at = time.monotonic()
        logger.info(f"Resolving configuration for environment '{self.options.environment}'")

        self.layered = self.builder.build(time_budget=self._remaining())
        self.state = StartupState.SOURCES_BUILT
        self._check_deadline(self.state.value)

        self.raw = self.layered.merge()
        self.bind_result = bind_settings(self.raw)
        self.state = StartupState.BOUND
        self._check_deadline(self.state.value)

        self.validation = self.validator.validate(
            self.bind_result.settings, self.bind_result.errors
        )
        if self.validation.failed:
            self.state = StartupState.VALIDATION_FAILED
            for error in self.validation.errors:
                logger.error(f"Configuration error: {error}")
            logger.error(self.validation.message)
            self.validation.raise_for_errors()

        self.state = StartupState.VALIDATED
        self.settings = self.bind_result.settings
        logger.info("Configuration validation completed successfully")
        return self.settings


def resolve_settings(
    options: SourceOptions,
    *,
    vault_client_factory: VaultClientFactory = KeyVaultSecretClient,
    deadline_seconds: float | None = None,
) -> AppSettings:
    """Convenience wrapper: build, bind and validate in one call."""
    return StartupOrchestrator(
        options,
        vault_client_factory=vault_client_factory,
        deadline_seconds=deadline_seconds,
    ).run()
