"""Commands for resolving registration policies and previewing specs."""

from __future__ import annotations

import sys
from pathlib import Path

import typer

from catreg.cli.common.context import (
    PolicyAppContext,
    PolicyOptions,
    build_policy_context,
)
from catreg.cli.common.exits import (
    CONFIG_EXIT_CODE,
    die,
    exit_from_registration_error,
    warn_exit,
)
from catreg.cli.common.options import ConfigOpt, JsonOpt, PolicyOpt, SetOpt
from catreg.cli.common.output import out
from catreg.core.adapters.unitycatalog import to_table_info
from catreg.core.config import REGISTRATION_POLICY
from catreg.core.errors import RegistrationError
from catreg.core.factory import get_policy, registry
from catreg.core.planning import plan_registrations

policy_app = typer.Typer(
    help="Registration policies.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@policy_app.callback()
def _init(
    ctx: typer.Context,
    config: Path | None = ConfigOpt,
    set_: list[str] = SetOpt,
):
    """Record config options; commands that need the config load it."""
    ctx.obj = PolicyOptions(config_path=config, overrides=set_)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _resolve_policy_name(appctx: PolicyAppContext, policy: str | None) -> str:
    """Pick the policy from --policy, the config, or an interactive prompt."""
    name = policy or appctx.config.get(REGISTRATION_POLICY)
    if name:
        return name
    if sys.stdin.isatty():
        picked = out.select_one("Select a registration policy:", registry.names())
        if picked:
            return picked
        warn_exit("No policy selected.", code=0)
    die(
        f"Missing required property {REGISTRATION_POLICY}. "
        f"Use --policy or --set {REGISTRATION_POLICY}=<name>.",
        code=CONFIG_EXIT_CODE,
    )


@policy_app.command("list")
def list_policies(json_: bool = JsonOpt):
    """List registered policy names."""
    names = registry.names()
    if json_:
        out.json(names)
        return
    out.policies_table(names, title="Registered policies")


@policy_app.command("plan")
def plan(
    ctx: typer.Context,
    paths: list[str] = typer.Argument(..., help="Storage paths to register"),
    policy: str | None = PolicyOpt,
    catalog: str | None = typer.Option(
        None, "--catalog", help="Unity Catalog catalog name for --json table info"
    ),
    json_: bool = JsonOpt,
):
    """Preview the registration specs a policy produces for each path."""
    opts: PolicyOptions = ctx.obj
    appctx = build_policy_context(opts.config_path, opts.overrides)
    policy_name = _resolve_policy_name(appctx, policy)
    config = appctx.config.with_overrides({REGISTRATION_POLICY: policy_name})

    try:
        reg_policy = get_policy(config)
    except RegistrationError as exc:
        exit_from_registration_error(exc)

    results = plan_registrations(reg_policy, paths)
    failed = [r for r in results if not r.ok]

    if json_:
        out.json(
            [
                {
                    "path": r.path,
                    "error": r.error,
                    "specs": [
                        {
                            **spec.to_dict(),
                            "table_info": to_table_info(spec, catalog).as_dict(),
                        }
                        for spec in r.specs
                    ],
                }
                for r in results
            ]
        )
    else:
        out.header("Registration plan")
        out.kv(
            {
                "Policy": policy_name,
                "Config": appctx.config_path or "-",
                "Paths": len(results),
            }
        )
        out.specs_table(results, title="Registration specs")

    if failed:
        if not json_:
            out.error(f"Failed to resolve {len(failed)} path(s).")
        raise typer.Exit(1)

    if not json_:
        out.success(f"Resolved {len(results)} path(s).")
