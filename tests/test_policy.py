from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath

import pytest
from databricks.sdk.service.catalog import TableType

from catreg.core.errors import (
    ConfigurationError,
    ConfigurationMissingError,
    InvalidIdentifierError,
)
from catreg.core.policy import RegistrationPolicy


def test_policy_requires_config():
    with pytest.raises(ValueError):
        RegistrationPolicy(None)


def test_literal_names_win_for_any_path():
    policy = RegistrationPolicy(
        {
            "database.name": "analytics",
            "table.name": "events",
            "table.regex": r"/(\w+)$",
        }
    )

    for path in ["/a/b", "/data/Other/thing", "s3://bucket/x"]:
        (spec,) = policy.get_registration_specs(path)
        assert spec.table.db_name == "analytics"
        assert spec.table.table_name == "events"


def test_literal_name_allows_regex_without_group():
    policy = RegistrationPolicy(
        {"database.name": "db", "table.name": "events", "table.regex": r"/data/\w+"}
    )

    (spec,) = policy.get_registration_specs("/data/x")

    assert spec.table.table_name == "events"
    assert policy.table_name_pattern is None


def test_none_value_falls_back_to_regex():
    policy = RegistrationPolicy(
        {"database.name": None, "database.regex": r"^/data/(\w+)", "table.name": "t"}
    )

    (spec,) = policy.get_registration_specs("/data/sales")

    assert spec.table.db_name == "sales"


def test_database_regex_extracts_first_group():
    policy = RegistrationPolicy({"database.regex": r"^/data/(\w+)/", "table.name": "raw"})

    (spec,) = policy.get_registration_specs("/data/Sales_2024/ingest")

    assert spec.table.db_name == "sales_2024"
    assert spec.table.table_name == "raw"


def test_base_table_definition_defaults():
    policy = RegistrationPolicy(
        {
            "database.name": "db",
            "table.name": "t",
            "table.partition.props": "owner:etl",
            "storage.props": "compressed:true",
            "serde.props": "avro.schema.url:/schemas/t.avsc",
        }
    )

    specs = policy.get_registration_specs(PurePosixPath("/data/db/t"))

    assert len(specs) == 1
    spec = specs[0]
    assert spec.path == "/data/db/t"
    assert spec.partition is None
    assert spec.table.location == "/data/db/t"
    assert spec.table.num_buckets == -1
    assert spec.table.table_type == TableType.EXTERNAL
    assert spec.table.serde.name == "AVRO"
    assert dict(spec.table.props) == {"owner": "etl"}
    assert dict(spec.table.storage_props) == {"compressed": "true"}
    assert dict(spec.table.serde_props) == {"avro.schema.url": "/schemas/t.avsc"}
    assert spec.table.full_name == "db.t"


def test_sanitizes_invalid_table_name_by_default():
    policy = RegistrationPolicy({"database.name": "db", "table.name": "My Table!"})

    (spec,) = policy.get_registration_specs("/p")

    assert spec.table.table_name == "my_table_"


def test_rejects_invalid_table_name_when_sanitizing_disabled():
    policy = RegistrationPolicy(
        {
            "database.name": "db",
            "table.name": "My Table!",
            "sanitize.invalid.names": "false",
        }
    )

    with pytest.raises(InvalidIdentifierError, match="my table!"):
        policy.get_registration_specs("/p")


def test_missing_table_keys_fail_naming_both_keys():
    policy = RegistrationPolicy({"database.name": "db"})

    with pytest.raises(ConfigurationMissingError, match="table.name or table.regex"):
        policy.get_registration_specs("/p")


def test_affixes_wrap_resolved_names():
    policy = RegistrationPolicy(
        {
            "database.regex": r"/data/([^/]+)",
            "database.name.prefix": "Raw_",
            "table.name": "events",
            "table.name.suffix": "_v2",
        }
    )

    (spec,) = policy.get_registration_specs("/data/Sales-EU/events")

    assert spec.table.db_name == "raw_sales_eu"
    assert spec.table.table_name == "events_v2"


def test_invalid_affix_is_rejected_after_concatenation():
    policy = RegistrationPolicy(
        {"database.name": "db", "table.name": "t", "table.name.prefix": "bad-"}
    )

    with pytest.raises(InvalidIdentifierError, match="table.name.prefix") as excinfo:
        policy.get_registration_specs("/p")

    assert excinfo.value.name == "bad-t"


@pytest.mark.parametrize(
    "props",
    [
        {"table.regex": r"/data/\w+"},
        {"database.regex": "(oops"},
        {"sanitize.invalid.names": "perhaps"},
        {"serde.manager.type": "xml"},
    ],
)
def test_bad_configuration_fails_at_construction(props: dict):
    with pytest.raises(ConfigurationError):
        RegistrationPolicy(props)


def test_serde_manager_type_is_case_insensitive():
    policy = RegistrationPolicy(
        {"database.name": "db", "table.name": "t", "serde.manager.type": "parquet"}
    )

    assert policy.serde.name == "PARQUET"


def test_concurrent_calls_do_not_interfere():
    policy = RegistrationPolicy(
        {"database.regex": r"^/data/(\w+)/", "table.regex": r"^/data/\w+/(\w+)"}
    )
    paths = [f"/data/db{i}/table{i}" for i in range(200)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(policy.get_registration_specs, paths))

    for i, (spec,) in enumerate(results):
        assert spec.path == paths[i]
        assert spec.table.db_name == f"db{i}"
        assert spec.table.table_name == f"table{i}"
        assert spec.table.location == paths[i]
