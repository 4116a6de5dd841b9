"""SerDe manager lookup.

A SerDe manager describes how a table's files are read and written. The
policy only carries it through to the table definition; it never inspects
the files themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from databricks.sdk.service.catalog import DataSourceFormat

from catreg.core.config import SERDE_MANAGER_TYPE
from catreg.core.errors import ConfigurationError

DEFAULT_SERDE_TYPE = "AVRO"


@dataclass(frozen=True)
class SerDeManager:
    """Storage format handle attached to a table definition."""

    name: str
    serde_lib: str
    input_format: str
    output_format: str
    data_source_format: DataSourceFormat


_MANAGERS: dict[str, SerDeManager] = {
    m.name: m
    for m in (
        SerDeManager(
            name="AVRO",
            serde_lib="org.apache.hadoop.hive.serde2.avro.AvroSerDe",
            input_format="org.apache.hadoop.hive.ql.io.avro.AvroContainerInputFormat",
            output_format="org.apache.hadoop.hive.ql.io.avro.AvroContainerOutputFormat",
            data_source_format=DataSourceFormat.AVRO,
        ),
        SerDeManager(
            name="ORC",
            serde_lib="org.apache.hadoop.hive.ql.io.orc.OrcSerde",
            input_format="org.apache.hadoop.hive.ql.io.orc.OrcInputFormat",
            output_format="org.apache.hadoop.hive.ql.io.orc.OrcOutputFormat",
            data_source_format=DataSourceFormat.ORC,
        ),
        SerDeManager(
            name="PARQUET",
            serde_lib="org.apache.hadoop.hive.ql.io.parquet.serde.ParquetHiveSerDe",
            input_format="org.apache.hadoop.hive.ql.io.parquet.MapredParquetInputFormat",
            output_format="org.apache.hadoop.hive.ql.io.parquet.MapredParquetOutputFormat",
            data_source_format=DataSourceFormat.PARQUET,
        ),
        SerDeManager(
            name="TEXT",
            serde_lib="org.apache.hadoop.hive.serde2.lazy.LazySimpleSerDe",
            input_format="org.apache.hadoop.mapred.TextInputFormat",
            output_format="org.apache.hadoop.hive.ql.io.HiveIgnoreKeyTextOutputFormat",
            data_source_format=DataSourceFormat.TEXT,
        ),
    )
}


def serde_types() -> list[str]:
    """Return the names accepted by `serde.manager.type`."""
    return sorted(_MANAGERS)


def get_serde_manager(props: Mapping[str, str]) -> SerDeManager:
    """Return the SerDe manager named by `serde.manager.type` (default AVRO)."""
    name = props.get(SERDE_MANAGER_TYPE, DEFAULT_SERDE_TYPE).strip().upper()
    try:
        return _MANAGERS[name]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown {SERDE_MANAGER_TYPE} '{name}' "
            f"(expected one of: {', '.join(serde_types())})"
        ) from exc
