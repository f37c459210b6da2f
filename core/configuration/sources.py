# =============================================================================
# core/configuration/sources.py - Configuration Sources
# =============================================================================
# A configuration source provides flat "Section:Sub:Field" -> string pairs.
# Sources are applied in order; later sources override earlier ones.
#
# Source types:
# - JsonFileSource: appsettings.json, appsettings.<env>.json, dev secrets file
# - EnvironmentVariablesSource: process environment, "__" as separator
# - InMemorySource: pairs fetched elsewhere (vault secrets, tests)
# =============================================================================

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from core.configuration.errors import ConfigurationSourceError
from lib.utils import KEY_DELIMITER, join_key

logger = logging.getLogger(__name__)

# Environment variables cannot contain ":" on every platform
ENV_VAR_DELIMITER = "__"


class SourceKind(str, Enum):
    """Origin of a configuration source."""
    FILE = "file"
    ENVIRONMENT_FILE = "environment-file"
    DEV_SECRETS = "dev-secrets"
    ENV_VARS = "env-vars"
    VAULT = "vault"


# =============================================================================
# Base Source
# =============================================================================

class ConfigSource(ABC):
    """
    Ordered, named provider of configuration key/value pairs.

    Attributes:
        name: Human-readable origin (file path, "environment", vault URL)
        kind: SourceKind of this source
        optional: Whether absence of the underlying origin is acceptable
        priority: Position in the source list, set by the builder (higher wins)

    Values are loaded once and cached, so a source can be merged more than
    once (the builder reads KeyVault:Url from an intermediate merge).
    """

    def __init__(self, name: str, kind: SourceKind, *, optional: bool = True):
        self.name = name
        self.kind = kind
        self.optional = optional
        self.priority = -1
        self._data: dict[str, str] | None = None

    def load(self) -> dict[str, str]:
        """Return the source's pairs, reading the origin on first call."""
        if self._data is None:
            self._data = self._read()
        return dict(self._data)

    @abstractmethod
    def _read(self) -> dict[str, str]:
        ...

    def describe(self) -> dict[str, Any]:
        """Non-sensitive description of the source for logs."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "priority": self.priority,
            "optional": self.optional,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, kind={self.kind.value}, priority={self.priority})"


# =============================================================================
# JSON Flattening
# =============================================================================

def _scalar_to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_json(data: Any, prefix: str = "") -> dict[str, str]:
    """
    Flatten a JSON document into hierarchical configuration keys.

    Objects nest with ":", arrays use their index as the key segment,
    empty objects/arrays produce an empty value so they can override.

    Example:
        flatten_json({"Security": {"AllowedOrigins": ["https://a", "https://b"]}})
        # {"Security:AllowedOrigins:0": "https://a", "Security:AllowedOrigins:1": "https://b"}
    """
    result: dict[str, str] = {}

    if isinstance(data, dict):
        items = [(str(k), v) for k, v in data.items()]
    elif isinstance(data, list):
        items = [(str(i), v) for i, v in enumerate(data)]
    else:
        result[prefix] = _scalar_to_string(data)
        return result

    if not items and prefix:
        result[prefix] = ""
        return result

    for segment, value in items:
        result.update(flatten_json(value, join_key(prefix, segment)))
    return result


# =============================================================================
# Concrete Sources
# =============================================================================

class JsonFileSource(ConfigSource):
    """
    JSON file source.

    A missing optional file yields no values. A present file that is not a
    JSON object raises ConfigurationSourceError.
    """

    def __init__(self, path: str | Path, kind: SourceKind = SourceKind.FILE, *, optional: bool = True):
        self.path = Path(path).expanduser()
        super().__init__(str(self.path), kind, optional=optional)

    def _read(self) -> dict[str, str]:
        if not self.path.is_file():
            if not self.optional:
                raise ConfigurationSourceError(self.name, "file not found")
            logger.info(f"Optional configuration file not found, skipping: {self.path}")
            return {}

        try:
            document = json.loads(self.path.read_text(encoding="utf-8-sig"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationSourceError(self.name, str(e)) from e

        if not isinstance(document, dict):
            raise ConfigurationSourceError(
                self.name, f"top-level JSON must be an object, got {type(document).__name__}"
            )

        values = flatten_json(document)
        logger.debug(f"Loaded {len(values)} keys from {self.path}")
        return values


class EnvironmentVariablesSource(ConfigSource):
    """
    Process environment variables.

    "__" maps to the hierarchy separator:
        AppSettings__Database__ConnectionString -> AppSettings:Database:ConnectionString

    An optional prefix restricts which variables are read and is stripped.
    """

    def __init__(self, environ: Mapping[str, str] | None = None, prefix: str = ""):
        super().__init__("environment", SourceKind.ENV_VARS, optional=True)
        self._environ = environ
        self.prefix = prefix

    def _read(self) -> dict[str, str]:
        environ = os.environ if self._environ is None else self._environ
        values: dict[str, str] = {}
        for name, value in environ.items():
            if self.prefix and not name.lower().startswith(self.prefix.lower()):
                continue
            key = name[len(self.prefix):].replace(ENV_VAR_DELIMITER, KEY_DELIMITER)
            if key:
                values[key] = value
        return values


class InMemorySource(ConfigSource):
    """Pairs that were already fetched (vault secrets) or built in code."""

    def __init__(self, name: str, values: Mapping[str, str], kind: SourceKind = SourceKind.FILE):
        super().__init__(name, kind, optional=True)
        self._values = dict(values)

    def _read(self) -> dict[str, str]:
        return dict(self._values)
