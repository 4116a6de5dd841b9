"""Registration policy: from a storage path to catalog registration specs.

The base policy obtains the database name from `database.name` or the first
group of `database.regex`, the table name from `table.name` or the first
group of `table.regex`, wraps both in the configured affixes, and builds an
unbucketed external table located according to its layout.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Mapping

from catreg.core.config import (
    DATABASE_NAME,
    DATABASE_NAME_PREFIX,
    DATABASE_NAME_SUFFIX,
    DATABASE_REGEX,
    SANITIZE_INVALID_NAMES,
    SERDE_PROPS,
    STORAGE_PROPS,
    TABLE_NAME,
    TABLE_NAME_PREFIX,
    TABLE_NAME_SUFFIX,
    TABLE_PARTITION_PROPS,
    TABLE_REGEX,
    RegistrationConfig,
    as_config,
)
from catreg.core.errors import InvalidIdentifierError
from catreg.core.layouts import FlatLayout, Layout
from catreg.core.models import NO_BUCKETS, RegistrationSpec, TableDefinition
from catreg.core.names import NameResolver, compile_name_pattern, is_valid_name, path_str
from catreg.core.serde import get_serde_manager

logger = logging.getLogger(__name__)


class RegistrationPolicy:
    """
    Turns a path into registration specs using configured naming rules.

    Instances are immutable after construction and safe to share between
    threads.
    """

    def __init__(
        self,
        config: Mapping[str, str] | None,
        layout: Layout | None = None,
    ) -> None:
        self.config: RegistrationConfig = as_config(config)
        self.layout: Layout = layout or FlatLayout()
        self.sanitize_names = self.config.get_bool(SANITIZE_INVALID_NAMES, True)
        self.db_name_pattern: re.Pattern | None = compile_name_pattern(
            self.config, DATABASE_NAME, DATABASE_REGEX
        )
        self.table_name_pattern: re.Pattern | None = compile_name_pattern(
            self.config, TABLE_NAME, TABLE_REGEX
        )
        self.db_name_prefix = self.config.get(DATABASE_NAME_PREFIX, "")
        self.db_name_suffix = self.config.get(DATABASE_NAME_SUFFIX, "")
        self.table_name_prefix = self.config.get(TABLE_NAME_PREFIX, "")
        self.table_name_suffix = self.config.get(TABLE_NAME_SUFFIX, "")
        self.serde = get_serde_manager(self.config)
        self.table_props = self.config.get_props(TABLE_PARTITION_PROPS)
        self.storage_props = self.config.get_props(STORAGE_PROPS)
        self.serde_props = self.config.get_props(SERDE_PROPS)
        self._resolver = NameResolver(self.config, sanitize=self.sanitize_names)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(layout={type(self.layout).__name__})"

    def get_database_name(self, path: str | os.PathLike[str]) -> str:
        """Return the affixed database name for `path`."""
        name = self._resolver.resolve(
            path, DATABASE_NAME, DATABASE_REGEX, self.db_name_pattern
        )
        return self._affix(
            name,
            self.db_name_prefix,
            self.db_name_suffix,
            DATABASE_NAME_PREFIX,
            DATABASE_NAME_SUFFIX,
        )

    def get_table_name(self, path: str | os.PathLike[str]) -> str:
        """Return the affixed table name for `path`."""
        name = self._resolver.resolve(
            path, TABLE_NAME, TABLE_REGEX, self.table_name_pattern
        )
        return self._affix(
            name,
            self.table_name_prefix,
            self.table_name_suffix,
            TABLE_NAME_PREFIX,
            TABLE_NAME_SUFFIX,
        )

    @staticmethod
    def _affix(
        name: str, prefix: str, suffix: str, prefix_key: str, suffix_key: str
    ) -> str:
        if not prefix and not suffix:
            return name
        full = f"{prefix}{name}{suffix}".lower()
        if not is_valid_name(full):
            raise InvalidIdentifierError(
                f"{full} is not a valid database or table name "
                f"(check {prefix_key} and {suffix_key})",
                name=full,
            )
        return full

    def get_table(self, path: str | os.PathLike[str]) -> TableDefinition:
        """Build a non-bucketed, external table definition for `path`."""
        return TableDefinition(
            db_name=self.get_database_name(path),
            table_name=self.get_table_name(path),
            serde=self.serde,
            location=self.layout.table_location(path),
            props=self.table_props,
            storage_props=self.storage_props,
            serde_props=self.serde_props,
            num_buckets=NO_BUCKETS,
        )

    def get_registration_specs(
        self, path: str | os.PathLike[str]
    ) -> list[RegistrationSpec]:
        """
        Return the registration specs for `path`.

        Args:
            path: Storage location to register.

        Returns:
            A non-empty list; the base policy always returns exactly one spec.

        Raises:
            ConfigurationMissingError: If a name cannot be resolved.
            InvalidIdentifierError: If a resolved name is not a valid identifier.
        """
        table = self.get_table(path)
        partition = self.layout.partition(path, table)
        logger.debug(
            "Resolved %s -> %s%s",
            path_str(path),
            table.full_name,
            f" [{partition.spec}]" if partition else "",
        )
        return [RegistrationSpec(path=path_str(path), table=table, partition=partition)]
