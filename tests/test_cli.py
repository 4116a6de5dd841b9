import json

from typer.testing import CliRunner

from catreg.cli.cli import app

runner = CliRunner()


def _invoke(*args: str):
    return runner.invoke(app, list(args), env={"CATREG_CONFIG": None})


def test_policy_list_json_includes_builtins():
    result = _invoke("policy", "list", "--json")

    assert result.exit_code == 0
    assert {"base", "parent_directory", "partitioned"} <= set(json.loads(result.stdout))


def test_plan_json_with_overrides():
    result = _invoke(
        "policy",
        "--set",
        "database.regex=^/data/(\\w+)/",
        "--set",
        "table.name=raw",
        "plan",
        "/data/Sales_2024/ingest",
        "--policy",
        "base",
        "--catalog",
        "main",
        "--json",
    )

    assert result.exit_code == 0, result.output
    (entry,) = json.loads(result.stdout)
    assert entry["error"] is None
    (spec,) = entry["specs"]
    assert spec["table"]["db_name"] == "sales_2024"
    assert spec["table"]["table_name"] == "raw"
    assert spec["table"]["num_buckets"] == -1
    assert spec["table_info"]["full_name"] == "main.sales_2024.raw"


def test_plan_reads_config_file(tmp_path):
    config = tmp_path / "reg.properties"
    config.write_text(
        "registration.policy=partitioned\n"
        "database.name=logs\n"
        "table.regex=^/data/(\\w+)/\n"
        "partition.regex=ds=(?P<ds>[^/]+)\n"
    )

    result = _invoke(
        "policy", "--config", str(config), "plan", "/data/clicks/ds=2024-01-01", "--json"
    )

    assert result.exit_code == 0, result.output
    (entry,) = json.loads(result.stdout)
    (spec,) = entry["specs"]
    assert spec["table"]["location"] == "/data/clicks"
    assert spec["partition"] == {
        "values": {"ds": "2024-01-01"},
        "location": "/data/clicks/ds=2024-01-01",
    }


def test_plan_table_output():
    result = _invoke(
        "policy",
        "--set",
        "database.name=db",
        "--set",
        "table.name=t",
        "plan",
        "/p",
        "--policy",
        "base",
    )

    assert result.exit_code == 0, result.output
    assert "Resolved 1 path(s)" in result.output


def test_plan_without_policy_exits_with_config_error():
    result = _invoke("policy", "plan", "/p")

    assert result.exit_code == 2
    assert "registration.policy" in result.output


def test_plan_unknown_policy_fails():
    result = _invoke("policy", "plan", "/p", "--policy", "nope")

    assert result.exit_code == 1
    assert "nope" in result.output


def test_plan_reports_failed_paths():
    result = _invoke(
        "policy",
        "--set",
        "database.name=db",
        "--set",
        "table.regex=^/data/(\\w+)",
        "plan",
        "/data/ok",
        "/other",
        "--policy",
        "base",
        "--json",
    )

    assert result.exit_code == 1
    entries = {e["path"]: e for e in json.loads(result.stdout)}
    assert entries["/data/ok"]["error"] is None
    assert "table.regex" in entries["/other"]["error"]


def test_missing_config_file_exits_with_config_error(tmp_path):
    result = _invoke(
        "policy", "--config", str(tmp_path / "missing.json"), "plan", "/p"
    )

    assert result.exit_code == 2


def test_invalid_override_exits_with_config_error():
    result = _invoke("policy", "--set", "broken", "plan", "/p")

    assert result.exit_code == 2


def test_policy_list_does_not_load_config(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")

    from_option = _invoke("policy", "--config", str(bad), "list", "--json")
    from_env = runner.invoke(
        app, ["policy", "list", "--json"], env={"CATREG_CONFIG": str(bad)}
    )

    assert from_option.exit_code == 0, from_option.output
    assert from_env.exit_code == 0, from_env.output
    assert "base" in json.loads(from_option.stdout)


def test_names_check():
    ok = _invoke("names", "check", "events", "My Table!", "--json")
    strict = _invoke("names", "check", "My Table!", "--no-sanitize")
    numeric = _invoke("names", "check", "2024")

    assert ok.exit_code == 0
    by_name = {r["name"]: r for r in json.loads(ok.stdout)}
    assert by_name["My Table!"]["sanitized"] == "my_table_"
    assert strict.exit_code == 1
    assert numeric.exit_code == 1
