from databricks.sdk.service.catalog import DataSourceFormat, TableType

from catreg.core.adapters.unitycatalog import to_table_info
from catreg.core.policy import RegistrationPolicy


def _spec(**extra: str):
    props = {"database.name": "sales", "table.name": "orders", **extra}
    (spec,) = RegistrationPolicy(props).get_registration_specs("/mnt/raw/orders")
    return spec


def test_to_table_info_maps_database_to_schema():
    info = to_table_info(_spec(), catalog_name="main")

    assert info.catalog_name == "main"
    assert info.schema_name == "sales"
    assert info.name == "orders"
    assert info.full_name == "main.sales.orders"
    assert info.table_type == TableType.EXTERNAL
    assert info.data_source_format == DataSourceFormat.AVRO
    assert info.storage_location == "/mnt/raw/orders"


def test_to_table_info_without_catalog_uses_two_level_name():
    info = to_table_info(_spec(**{"serde.manager.type": "ORC"}))

    assert info.catalog_name is None
    assert info.full_name == "sales.orders"
    assert info.data_source_format == DataSourceFormat.ORC


def test_to_table_info_folds_property_bags():
    info = to_table_info(
        _spec(
            **{
                "table.partition.props": "owner:etl",
                "storage.props": "compressed:true",
                "serde.props": "avro.schema.url:/s.avsc",
            }
        )
    )

    assert info.properties == {
        "owner": "etl",
        "storage.compressed": "true",
        "serde.avro.schema.url": "/s.avsc",
    }
    assert info.as_dict()["table_type"] == "EXTERNAL"
