# =============================================================================
# core/configuration/ - Layered Configuration Pipeline
# =============================================================================
# - sources.py: configuration sources (JSON files, env vars, in-memory)
# - builder.py: ordered source list per environment, Key Vault layer
# - binder.py: merge into RawConfigMap, bind into AppSettings
# - validator.py: required + format rules, aggregated results
# - startup.py: build -> bind -> validate orchestration
# - errors.py: fatal pipeline errors
# =============================================================================

from .binder import BindingError, BindResult, RawConfigMap, bind_settings, merge_sources
from .builder import (
    DEVELOPMENT_ENVIRONMENT,
    LayeredSourceBuilder,
    LayeredSources,
    SourceOptions,
    VaultStatus,
    is_development,
)
from .errors import (
    ConfigurationSourceError,
    ConfigurationValidationError,
    StartupDeadlineExceededError,
    StartupStateError,
)
from .sources import (
    ConfigSource,
    EnvironmentVariablesSource,
    InMemorySource,
    JsonFileSource,
    SourceKind,
    flatten_json,
)
from .startup import StartupOrchestrator, StartupState, resolve_settings
from .validator import (
    DEFAULT_RULES,
    FORMAT_RULES,
    REQUIRED_RULES,
    SettingsValidator,
    ValidationResult,
    ValidationRule,
    validate_settings,
)

__all__ = [
    # Sources
    "ConfigSource",
    "EnvironmentVariablesSource",
    "InMemorySource",
    "JsonFileSource",
    "SourceKind",
    "flatten_json",
    # Builder
    "DEVELOPMENT_ENVIRONMENT",
    "LayeredSourceBuilder",
    "LayeredSources",
    "SourceOptions",
    "VaultStatus",
    "is_development",
    # Binder
    "BindingError",
    "BindResult",
    "RawConfigMap",
    "bind_settings",
    "merge_sources",
    # Validator
    "DEFAULT_RULES",
    "FORMAT_RULES",
    "REQUIRED_RULES",
    "SettingsValidator",
    "ValidationResult",
    "ValidationRule",
    "validate_settings",
    # Startup
    "StartupOrchestrator",
    "StartupState",
    "resolve_settings",
    # Errors
    "ConfigurationSourceError",
    "ConfigurationValidationError",
    "StartupDeadlineExceededError",
    "StartupStateError",
]
