"""Database and table name resolution.

A name comes either from a literal property (e.g. `table.name`) or from the
first capture group of a regex property (e.g. `table.regex`) applied to the
string form of a path. Names are lower-cased, then checked against the
catalog naming rules and optionally sanitized.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Mapping

from catreg.core.errors import (
    ConfigurationError,
    ConfigurationMissingError,
    InvalidIdentifierError,
    PatternMatchError,
)

logger = logging.getLogger(__name__)

# Starts with a letter or digit, then letters, digits and '_' only.
_VALID_NAME_RE = re.compile(r"[a-z0-9][a-z0-9_]*")
# At least one letter or '_', i.e. not digits only.
_HAS_NON_DIGIT_RE = re.compile(r".*[a-z_].*")
_INVALID_CHARS_RE = re.compile(r"[^a-zA-Z0-9_]")


def path_str(path: str | os.PathLike[str]) -> str:
    """Return the string form of a path without normalizing it."""
    return os.fspath(path)


def is_valid_name(name: str) -> bool:
    """
    Determine whether a database or table name is valid.

    A name is valid if and only if it starts with an alphanumeric character,
    contains only alphanumeric characters and '_', and is not made of digits
    only. The check is case-insensitive.
    """
    if name is None:
        raise ValueError("name must not be None")
    name = name.lower()
    return bool(_VALID_NAME_RE.fullmatch(name)) and bool(
        _HAS_NON_DIGIT_RE.fullmatch(name)
    )


def sanitize_name(name: str) -> str:
    """Replace every character that is not alphanumeric or '_' with '_'."""
    return _INVALID_CHARS_RE.sub("_", name)


def compile_name_pattern(
    props: Mapping[str, str], name_key: str, regex_key: str
) -> re.Pattern | None:
    """
    Compile the regex stored under `regex_key`, if any.

    A literal under `name_key` always wins, so the regex is ignored then.
    Only capture group 1 is ever used, so a pattern without groups is
    rejected here rather than on the first path.
    """
    raw = props.get(regex_key)
    if raw is None or name_key in props:
        return None
    try:
        pattern = re.compile(raw)
    except re.error as exc:
        raise ConfigurationError(f"Invalid regex for {regex_key}: {exc}") from exc
    if pattern.groups < 1:
        raise ConfigurationError(
            f"Regex for {regex_key} must contain a capture group: {raw}"
        )
    return pattern


class NameResolver:
    """Resolves and validates database or table names from paths."""

    def __init__(self, props: Mapping[str, str], *, sanitize: bool = True) -> None:
        self.props = props
        self.sanitize = sanitize

    def resolve_raw(
        self,
        path: str | os.PathLike[str],
        name_key: str,
        regex_key: str,
        pattern: re.Pattern | None,
    ) -> str:
        """Return the lower-cased name before any validation."""
        if name_key in self.props:
            name = self.props[name_key]
        elif pattern is not None:
            location = path_str(path)
            match = pattern.search(location)
            group = match.group(1) if match else None
            if group is None:
                raise PatternMatchError(
                    f"Property {regex_key} ({pattern.pattern}) has no match "
                    f"for group 1 in path {location}",
                    key=regex_key,
                    path=location,
                )
            name = group
        else:
            raise ConfigurationMissingError(
                f"Missing required property {name_key} or {regex_key}",
                keys=(name_key, regex_key),
            )
        return name.lower()

    def resolve(
        self,
        path: str | os.PathLike[str],
        name_key: str,
        regex_key: str,
        pattern: re.Pattern | None,
    ) -> str:
        """
        Resolve a name and enforce the naming rules.

        An invalid name is sanitized when sanitization is enabled and checked
        once more; if it is still invalid an InvalidIdentifierError is raised.
        """
        name = self.resolve_raw(path, name_key, regex_key, pattern)

        if self.sanitize and not is_valid_name(name):
            sanitized = sanitize_name(name)
            logger.debug("Sanitized %s name '%s' -> '%s'", name_key, name, sanitized)
            name = sanitized

        if is_valid_name(name):
            return name

        raise InvalidIdentifierError(
            f"{name} is not a valid database or table name", name=name
        )
