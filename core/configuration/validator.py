# =============================================================================
# core/configuration/validator.py - Settings Validator
# =============================================================================
# Validates bound AppSettings against a list of rules.
#
# A rule is (field, accessor, predicate, message): the accessor reads a value
# from the settings, the predicate returns True when the value is valid.
# Two rule sets exist:
# - REQUIRED_RULES: declarative non-empty checks for the required fields
# - FORMAT_RULES: custom format / range checks (skip empty values so a
#   missing field is reported exactly once, by its required rule)
#
# Every rule always runs: all violations are collected so operators see the
# full list in one pass.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from core.configuration.binder import BindingError
from core.configuration.errors import ConfigurationValidationError
from core.models.settings import AppSettings

_HTTP_URL = TypeAdapter(AnyHttpUrl)


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of one validation run: success, or an ordered list of violations.

    There is no partial success - a result with any error is a failure.
    """

    errors: tuple[str, ...] = ()
    section: str = AppSettings.SECTION_NAME

    @classmethod
    def success(cls, section: str = AppSettings.SECTION_NAME) -> "ValidationResult":
        return cls((), section)

    @classmethod
    def failure(cls, errors: Iterable[str], section: str = AppSettings.SECTION_NAME) -> "ValidationResult":
        errors = tuple(errors)
        if not errors:
            raise ValueError("A failed validation result needs at least one error")
        return cls(errors, section)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def message(self) -> str:
        """All violations joined for display."""
        if self.succeeded:
            return f"Configuration validation succeeded for {self.section}"
        return f"Configuration validation failed for {self.section}: {', '.join(self.errors)}"

    def raise_for_errors(self) -> None:
        """Raise ConfigurationValidationError if this result is a failure."""
        if self.failed:
            raise ConfigurationValidationError(list(self.errors), self.section)


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class ValidationRule:
    """One check: the value read by `accessor` must satisfy `predicate`."""

    field: str
    accessor: Callable[[AppSettings], Any]
    predicate: Callable[[Any], bool]
    message: str | Callable[[Any], str]

    def check(self, settings: AppSettings) -> str | None:
        """Return the violation message, or None when the rule passes."""
        value = self.accessor(settings)
        if self.predicate(value):
            return None
        if callable(self.message):
            return self.message(value)
        return self.message


def has_value(value: Any) -> bool:
    """True when a value is present and not just whitespace."""
    return value is not None and bool(str(value).strip())


def is_http_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError:
        return False
    return True


def is_origin(value: str) -> bool:
    """True for "*" or a bare http(s) origin (scheme, host, optional port)."""
    if value == "*":
        return True
    if not is_http_url(value):
        return False
    url = _HTTP_URL.validate_python(value)
    return url.path in (None, "", "/") and not url.query and not url.fragment


def _invalid_origins(origins: Sequence[str]) -> list[str]:
    return [origin for origin in origins if not is_origin(origin)]


REQUIRED_RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        "Environment",
        lambda s: s.environment,
        has_value,
        "Environment is required",
    ),
    ValidationRule(
        "Database:ConnectionString",
        lambda s: s.database.connection_string,
        has_value,
        "Database connection string is required",
    ),
    ValidationRule(
        "ExternalApi:BaseUrl",
        lambda s: s.external_api.base_url,
        has_value,
        "External API base URL is required",
    ),
    ValidationRule(
        "ExternalApi:ApiKey",
        lambda s: s.external_api.api_key,
        has_value,
        "External API key is required",
    ),
    ValidationRule(
        "Security:JwtSecret",
        lambda s: s.security.jwt_secret,
        has_value,
        "JWT secret is required",
    ),
)

FORMAT_RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        "ExternalApi:BaseUrl",
        lambda s: s.external_api.base_url,
        lambda v: not has_value(v) or is_http_url(v),
        lambda v: f"External API base URL must be an absolute http(s) URL (got '{v}')",
    ),
    ValidationRule(
        "Database:CommandTimeout",
        lambda s: s.database.command_timeout,
        lambda v: v > 0,
        "Database command timeout must be greater than zero",
    ),
    ValidationRule(
        "Database:MaxRetryCount",
        lambda s: s.database.max_retry_count,
        lambda v: v >= 0,
        "Database max retry count must not be negative",
    ),
    ValidationRule(
        "ExternalApi:TimeoutSeconds",
        lambda s: s.external_api.timeout_seconds,
        lambda v: v > 0,
        "External API timeout must be greater than zero",
    ),
    ValidationRule(
        "Security:TokenExpirationMinutes",
        lambda s: s.security.token_expiration_minutes,
        lambda v: v > 0,
        "Token expiration minutes must be greater than zero",
    ),
    ValidationRule(
        "Security:AllowedOrigins",
        lambda s: s.security.allowed_origins,
        lambda v: not _invalid_origins(v),
        lambda v: f"Allowed origins must be '*' or http(s) origins: {', '.join(_invalid_origins(v))}",
    ),
)

DEFAULT_RULES: tuple[ValidationRule, ...] = REQUIRED_RULES + FORMAT_RULES


# =============================================================================
# Validator
# =============================================================================

class SettingsValidator:
    """
    Evaluates rules against AppSettings and aggregates every violation.

    Example:
        result = SettingsValidator().validate(settings)
        if result.failed:
            print(result.message)
    """

    def __init__(self, rules: Sequence[ValidationRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def validate(
        self,
        settings: AppSettings,
        binding_errors: Iterable[BindingError] = (),
    ) -> ValidationResult:
        """
        Run every rule.

        Args:
            settings: Bound settings
            binding_errors: Malformed values found by the binder; reported first

        Returns:
            ValidationResult listing binding errors then rule violations in rule order
        """
        errors = [str(error) for error in binding_errors]
        for rule in self.rules:
            violation = rule.check(settings)
            if violation is not None:
                errors.append(violation)

        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success()


def validate_settings(
    settings: AppSettings,
    binding_errors: Iterable[BindingError] = (),
) -> ValidationResult:
    """Validate with the default rule set (required + format rules)."""
    return SettingsValidator().validate(settings, binding_errors)
