"""Registration configuration.

The configuration is a flat, read-only mapping of string keys to string
values. It is built once by the caller (from a file, a dict, CLI overrides)
and handed to a policy, which never mutates it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from catreg.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DATABASE_NAME = "database.name"
DATABASE_REGEX = "database.regex"
DATABASE_NAME_PREFIX = "database.name.prefix"
DATABASE_NAME_SUFFIX = "database.name.suffix"
TABLE_NAME = "table.name"
TABLE_REGEX = "table.regex"
TABLE_NAME_PREFIX = "table.name.prefix"
TABLE_NAME_SUFFIX = "table.name.suffix"
SANITIZE_INVALID_NAMES = "sanitize.invalid.names"
REGISTRATION_POLICY = "registration.policy"

SERDE_MANAGER_TYPE = "serde.manager.type"
TABLE_PARTITION_PROPS = "table.partition.props"
STORAGE_PROPS = "storage.props"
SERDE_PROPS = "serde.props"
PARTITION_REGEX = "partition.regex"

CONFIG_ENV = "CATREG_CONFIG"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class RegistrationConfig(Mapping[str, str]):
    """Immutable snapshot of registration properties."""

    def __init__(self, props: Mapping[str, object] | None = None) -> None:
        # A None value means the key is unset.
        data = {str(k): str(v) for k, v in (props or {}).items() if v is not None}
        self._props = MappingProxyType(data)

    def __getitem__(self, key: str) -> str:
        return self._props[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def __repr__(self) -> str:
        return f"RegistrationConfig({dict(self._props)!r})"

    def get_bool(self, key: str, default: bool) -> bool:
        """Return a boolean property, accepting the usual true/false spellings."""
        raw = self._props.get(key)
        if raw is None:
            return default
        value = raw.strip().lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise ConfigurationError(f"Property {key} must be a boolean, got '{raw}'")

    def get_props(self, key: str) -> dict[str, str]:
        """
        Parse a property bag stored as `k1:v1,k2:v2`.

        Blank entries are skipped. An entry without a `:` separator is a
        configuration error.
        """
        raw = self._props.get(key, "")
        bag: dict[str, str] = {}
        for item in raw.split(","):
            item = item.strip()
            if not item:
                continue
            if ":" not in item:
                raise ConfigurationError(
                    f"Invalid entry '{item}' in {key} (expected key:value)"
                )
            k, v = item.split(":", 1)
            bag[k.strip()] = v.strip()
        return bag

    def with_overrides(self, overrides: Mapping[str, str]) -> RegistrationConfig:
        """Return a new configuration with `overrides` layered on top."""
        merged = dict(self._props)
        merged.update(overrides)
        return RegistrationConfig(merged)


def as_config(props: Mapping[str, object] | None) -> RegistrationConfig:
    """Wrap a plain mapping, leaving an existing RegistrationConfig untouched."""
    if props is None:
        raise ValueError("Registration configuration must not be None")
    if isinstance(props, RegistrationConfig):
        return props
    return RegistrationConfig(props)


def parse_properties(text: str) -> dict[str, str]:
    """Parse `key=value` lines; `#` and `!` start comment lines."""
    props: dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith(("#", "!")):
            continue
        if "=" not in line:
            raise ConfigurationError(
                f"Line {lineno}: expected key=value, got '{line}'"
            )
        key, value = line.split("=", 1)
        props[key.strip()] = value.strip()
    return props


def parse_overrides(items: Iterable[str]) -> dict[str, str]:
    """Turn repeated `key=value` strings (e.g. from `--set`) into a dict."""
    overrides: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise ConfigurationError(f"Invalid override '{item}' (expected key=value)")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ConfigurationError(f"Invalid override '{item}' (empty key)")
        overrides[key] = value
    return overrides


def load_config(path: str | Path) -> RegistrationConfig:
    """
    Load a configuration file.

    `.json` files must hold a flat object; anything else is read as a
    properties file.
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc

    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(f"{path} must contain a JSON object")
        if any(isinstance(v, (dict, list)) for v in payload.values()):
            raise ConfigurationError(f"{path} must be flat (string values only)")
        props = {k: _json_scalar(v) for k, v in payload.items()}
    else:
        props = parse_properties(text)

    logger.debug("Loaded %d properties from %s", len(props), path)
    return RegistrationConfig(props)


def _json_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
