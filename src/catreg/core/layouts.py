"""Storage layout strategies.

A layout answers the two path questions a policy cannot answer from names
alone: where the table lives, and which partition (if any) a path is. Each
registered policy variant pairs the shared naming logic with one layout.
"""

from __future__ import annotations

import os
import posixpath
import re
from typing import Mapping, Protocol

from catreg.core.config import PARTITION_REGEX
from catreg.core.errors import (
    ConfigurationError,
    ConfigurationMissingError,
    PatternMatchError,
    RegistrationError,
)
from catreg.core.models import PartitionDefinition, TableDefinition
from catreg.core.names import path_str

# `scheme://authority` prefix of a URI, e.g. `s3://bucket`.
_URI_ROOT_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*://[^/]*)(.*)$", re.DOTALL)


class Layout(Protocol):
    """Interface for deriving table location and partition from a path."""

    def table_location(self, path: str | os.PathLike[str]) -> str:
        """Return the storage location of the table that owns `path`."""
        ...

    def partition(
        self, path: str | os.PathLike[str], table: TableDefinition
    ) -> PartitionDefinition | None:
        """Return the partition `path` represents, or None for unpartitioned data."""
        ...


class FlatLayout:
    """Each path is an unpartitioned table located at the path itself."""

    def table_location(self, path: str | os.PathLike[str]) -> str:
        return path_str(path)

    def partition(
        self, path: str | os.PathLike[str], table: TableDefinition
    ) -> PartitionDefinition | None:
        return None


class ParentDirectoryLayout(FlatLayout):
    """Each path is a data directory (e.g. a snapshot) of a table at its parent."""

    def table_location(self, path: str | os.PathLike[str]) -> str:
        location = path_str(path)
        match = _URI_ROOT_RE.match(location)
        root, rest = (match.group(1), match.group(2)) if match else ("", location)
        rest = rest.rstrip("/")
        parent = posixpath.dirname(rest)
        if not rest or not parent or parent == rest or parent.endswith(":"):
            raise RegistrationError(f"Path {location} has no parent directory")
        if root:
            return root + parent.rstrip("/")
        return parent


class PartitionedLayout:
    """
    Paths are partitions of a table, described by a named-group regex.

    Every named group of `partition.regex` becomes a partition key, in group
    order. The table location is the part of the path before the match, so
    `/data/events/ds=2024-01-01` with `ds=(?P<ds>[^/]+)` gives a table at
    `/data/events` and a partition `ds=2024-01-01`.
    """

    def __init__(self, pattern: re.Pattern) -> None:
        if not pattern.groupindex:
            raise ConfigurationError(
                f"{PARTITION_REGEX} must contain at least one named group: "
                f"{pattern.pattern}"
            )
        self.pattern = pattern
        self.keys = [
            name for name, _ in sorted(pattern.groupindex.items(), key=lambda kv: kv[1])
        ]

    @classmethod
    def from_config(cls, props: Mapping[str, str]) -> PartitionedLayout:
        raw = props.get(PARTITION_REGEX)
        if raw is None:
            raise ConfigurationMissingError(
                f"Missing required property {PARTITION_REGEX}",
                keys=(PARTITION_REGEX,),
            )
        try:
            pattern = re.compile(raw)
        except re.error as exc:
            raise ConfigurationError(
                f"Invalid regex for {PARTITION_REGEX}: {exc}"
            ) from exc
        return cls(pattern)

    def _match(self, location: str) -> re.Match:
        match = self.pattern.search(location)
        if match is None or any(match.group(k) is None for k in self.keys):
            raise PatternMatchError(
                f"Property {PARTITION_REGEX} ({self.pattern.pattern}) does not "
                f"match every partition key in path {location}",
                key=PARTITION_REGEX,
                path=location,
            )
        return match

    def table_location(self, path: str | os.PathLike[str]) -> str:
        location = path_str(path)
        table_location = location[: self._match(location).start()].rstrip("/")
        if not table_location:
            raise PatternMatchError(
                f"Property {PARTITION_REGEX} matches at the start of {location}, "
                "leaving no table location",
                key=PARTITION_REGEX,
                path=location,
            )
        return table_location

    def partition(
        self, path: str | os.PathLike[str], table: TableDefinition
    ) -> PartitionDefinition | None:
        location = path_str(path)
        match = self._match(location)
        return PartitionDefinition(
            db_name=table.db_name,
            table_name=table.table_name,
            values=tuple((k, match.group(k)) for k in self.keys),
            location=location,
            props=table.props,
            storage_props=table.storage_props,
            serde_props=table.serde_props,
        )
