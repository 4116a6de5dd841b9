from __future__ import annotations

from databricks.sdk.service.catalog import TableInfo

from catreg.core.models import RegistrationSpec


def to_table_info(spec: RegistrationSpec, catalog_name: str | None = None) -> TableInfo:
    """
    Convert a registration spec into a Databricks SDK TableInfo.

    The policy's database maps to a Unity Catalog schema. Storage and SerDe
    properties are folded into the table properties with `storage.` and
    `serde.` prefixes, since TableInfo has a single property map.
    """
    table = spec.table
    properties = dict(table.props)
    properties.update({f"storage.{k}": v for k, v in table.storage_props.items()})
    properties.update({f"serde.{k}": v for k, v in table.serde_props.items()})

    full_name = (
        f"{catalog_name}.{table.full_name}" if catalog_name else table.full_name
    )
    return TableInfo(
        catalog_name=catalog_name,
        schema_name=table.db_name,
        name=table.table_name,
        full_name=full_name,
        table_type=table.table_type,
        data_source_format=table.serde.data_source_format,
        storage_location=table.location,
        properties=properties,
    )
