"""Registration descriptors.

These models are what a policy hands to an external catalog client. They are
immutable and free of any client or CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from databricks.sdk.service.catalog import TableType

from catreg.core.serde import SerDeManager

NO_BUCKETS = -1


def _frozen(props: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(props or {}))


@dataclass(frozen=True)
class TableDefinition:
    """
    Table to register in the catalog.

    Attributes:
        db_name: Database (schema) identifier.
        table_name: Table identifier.
        serde: Storage format handle for the table's files.
        location: Storage location of the table data.
        props: Table parameters, shared with partitions.
        storage_props: Storage descriptor parameters.
        serde_props: SerDe parameters.
        num_buckets: Bucket count; -1 means the table is not bucketed.
        table_type: Catalog table kind.
    """

    db_name: str
    table_name: str
    serde: SerDeManager
    location: str
    props: Mapping[str, str] = field(default_factory=dict)
    storage_props: Mapping[str, str] = field(default_factory=dict)
    serde_props: Mapping[str, str] = field(default_factory=dict)
    num_buckets: int = NO_BUCKETS
    table_type: TableType = TableType.EXTERNAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "props", _frozen(self.props))
        object.__setattr__(self, "storage_props", _frozen(self.storage_props))
        object.__setattr__(self, "serde_props", _frozen(self.serde_props))

    @property
    def full_name(self) -> str:
        """Return `database.table`."""
        return f"{self.db_name}.{self.table_name}"


@dataclass(frozen=True)
class PartitionDefinition:
    """A partition of a registered table."""

    db_name: str
    table_name: str
    values: tuple[tuple[str, str], ...]
    location: str
    props: Mapping[str, str] = field(default_factory=dict)
    storage_props: Mapping[str, str] = field(default_factory=dict)
    serde_props: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "props", _frozen(self.props))
        object.__setattr__(self, "storage_props", _frozen(self.storage_props))
        object.__setattr__(self, "serde_props", _frozen(self.serde_props))

    @property
    def keys(self) -> list[str]:
        return [k for k, _ in self.values]

    @property
    def spec(self) -> str:
        """Return the partition spec string, e.g. `ds=2024-01-01/hr=00`."""
        return "/".join(f"{k}={v}" for k, v in self.values)


@dataclass(frozen=True)
class RegistrationSpec:
    """Everything needed to register one path: a table and an optional partition."""

    path: str
    table: TableDefinition
    partition: PartitionDefinition | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable view of the spec."""
        table = self.table
        partition = self.partition
        return {
            "path": self.path,
            "table": {
                "db_name": table.db_name,
                "table_name": table.table_name,
                "location": table.location,
                "serde": table.serde.name,
                "props": dict(table.props),
                "storage_props": dict(table.storage_props),
                "serde_props": dict(table.serde_props),
                "num_buckets": table.num_buckets,
                "table_type": table.table_type.value,
            },
            "partition": None
            if partition is None
            else {
                "values": dict(partition.values),
                "location": partition.location,
            },
        }
