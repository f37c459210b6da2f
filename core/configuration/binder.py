# =============================================================================
# core/configuration/binder.py - Settings Binder
# =============================================================================
# Two steps:
# 1. merge_sources(): apply sources in order into a RawConfigMap
#    (later source wins per key, keys compared case-insensitively)
# 2. bind_settings(): project the "AppSettings" section into AppSettings
#
# Coercion rules:
# - int:  decimal text, optional sign ("30", "-1")
# - bool: "true" / "false", case-insensitive
# - str sequences: indexed children ("AllowedOrigins:0", ":1", ...) or,
#   when there are none, a comma-separated scalar
#
# A present but malformed value is a BindingError: the field keeps its
# default and the error is reported by the validator, so startup fails.
# =============================================================================

from __future__ import annotations

import logging
import re
import types
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence, Union, get_args, get_origin

from pydantic import BaseModel

from core.configuration.sources import ConfigSource
from core.models.settings import AppSettings
from lib.utils import KEY_DELIMITER, join_key

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_BOOLEAN_VALUES = {"true": True, "false": False}
_TYPE_NAMES = {int: "an integer", bool: "true or false", str: "a string"}


# =============================================================================
# Raw Configuration Map
# =============================================================================

class RawConfigMap(Mapping[str, str]):
    """
    Read-only merged configuration with case-insensitive hierarchical keys.

    Example:
        raw = RawConfigMap({"AppSettings:Environment": "Production"})
        raw["appsettings:environment"]  # "Production"
        raw.child_segments("AppSettings")  # ["Environment"]
    """

    def __init__(self, values: Mapping[str, str] | None = None):
        # folded key -> (original key, value)
        self._entries: dict[str, tuple[str, str]] = {}
        for key, value in (values or {}).items():
            self._entries[key.casefold()] = (key, value)

    def __getitem__(self, key: str) -> str:
        return self._entries[key.casefold()][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RawConfigMap):
            return {k: v for k, (_, v) in self._entries.items()} == {
                k: v for k, (_, v) in other._entries.items()
            }
        return NotImplemented

    def __repr__(self) -> str:
        return f"RawConfigMap({len(self)} keys)"

    def child_segments(self, prefix: str) -> list[str]:
        """Distinct immediate child segment names under a key, in first-seen order."""
        folded_prefix = prefix.casefold() + KEY_DELIMITER
        depth = len(prefix.split(KEY_DELIMITER))
        seen: dict[str, str] = {}
        for folded, (original, _) in self._entries.items():
            if not folded.startswith(folded_prefix):
                continue
            segment = original.split(KEY_DELIMITER)[depth]
            seen.setdefault(segment.casefold(), segment)
        return list(seen.values())


def merge_sources(sources: Sequence[ConfigSource]) -> RawConfigMap:
    """
    Merge sources in list order; the last source defining a key wins.

    Args:
        sources: Sources ordered lowest -> highest precedence

    Returns:
        RawConfigMap with every key from every source
    """
    merged: dict[str, tuple[str, str]] = {}
    for source in sources:
        for key, value in source.load().items():
            merged[key.casefold()] = (key, value)
    return RawConfigMap(dict(merged.values()))


# =============================================================================
# Binding
# =============================================================================

@dataclass(frozen=True)
class BindingError:
    """A value that is present but cannot be coerced to its field's type."""
    key: str
    value: str
    expected: str

    def __str__(self) -> str:
        return f"{self.key} must be {self.expected} (got '{self.value}')"


@dataclass(frozen=True)
class BindResult:
    """Bound settings plus every binding error found along the way."""
    settings: AppSettings
    errors: tuple[BindingError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return (inner type, is_optional) for `X | None` annotations."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def _is_string_sequence(annotation: Any) -> bool:
    return get_origin(annotation) in (list, tuple) and str in get_args(annotation)


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def coerce_value(value: str, target: type) -> Any:
    """
    Convert a raw string to the target scalar type.

    Raises:
        ValueError: If the text is not a valid value of the target type
    """
    if target is str:
        return value
    if target is bool:
        text = value.strip().lower()
        if text not in _BOOLEAN_VALUES:
            raise ValueError(value)
        return _BOOLEAN_VALUES[text]
    if target is int:
        text = value.strip()
        if not _INTEGER_PATTERN.fullmatch(text):
            raise ValueError(value)
        return int(text)
    raise TypeError(f"Unsupported settings field type: {target!r}")


def _bind_sequence(raw: RawConfigMap, key: str) -> list[str] | None:
    indexes = sorted(
        (int(segment) for segment in raw.child_segments(key) if segment.isdecimal()),
    )
    if indexes:
        return [raw.get(join_key(key, str(index)), "") for index in indexes]

    scalar = raw.get(key)
    if scalar is None:
        return None
    return [item.strip() for item in scalar.split(",") if item.strip()]


def _bind_model(
    model: type[BaseModel],
    raw: RawConfigMap,
    prefix: str,
    errors: list[BindingError],
) -> dict[str, Any]:
    data: dict[str, Any] = {}

    for name, field in model.model_fields.items():
        alias = field.alias or name
        key = join_key(prefix, alias)
        annotation, optional = _unwrap_optional(field.annotation)

        if _is_model(annotation):
            data[alias] = _bind_model(annotation, raw, key, errors)
            continue

        if _is_string_sequence(annotation):
            items = _bind_sequence(raw, key)
            if items is not None:
                data[alias] = items
            continue

        value = raw.get(key)
        if value is None:
            continue
        # Blank values count as unset for optional and non-string fields
        if not value.strip() and (optional or annotation is not str):
            continue

        try:
            data[alias] = coerce_value(value, annotation)
        except ValueError:
            errors.append(BindingError(key, value, _TYPE_NAMES.get(annotation, str(annotation))))

    return data


def bind_model(model: type[BaseModel], raw: RawConfigMap, section: str) -> tuple[Any, tuple[BindingError, ...]]:
    """
    Bind any settings model from a configuration section.

    Fields absent from the map keep their model defaults; malformed
    values keep their defaults and are returned as BindingErrors.
    """
    errors: list[BindingError] = []
    data = _bind_model(model, raw, section, errors)
    return model.model_validate(data), tuple(errors)


def bind_settings(raw: RawConfigMap, section: str = AppSettings.SECTION_NAME) -> BindResult:
    """
    Project the merged configuration into AppSettings.

    Args:
        raw: Merged configuration
        section: Root section holding the settings (default "AppSettings")

    Returns:
        BindResult with the settings and any binding errors
    """
    settings, errors = bind_model(AppSettings, raw, section)
    for error in errors:
        logger.debug(f"Configuration binding error: {error}")
    return BindResult(settings=settings, errors=errors)
