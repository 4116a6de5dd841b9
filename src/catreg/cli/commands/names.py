"""Commands for checking catalog identifiers."""

from __future__ import annotations

import typer

from catreg.cli.common.options import JsonOpt
from catreg.cli.common.output import out
from catreg.core.planning import check_names

names_app = typer.Typer(
    help="Database and table name checks.",
    no_args_is_help=True,
)


@names_app.command("check")
def check(
    names: list[str] = typer.Argument(..., help="Candidate database/table names"),
    sanitize: bool = typer.Option(
        True,
        "--sanitize/--no-sanitize",
        help="Accept names that become valid after sanitizing",
    ),
    json_: bool = JsonOpt,
):
    """Check names against catalog naming rules."""
    results = check_names(names)
    rejected = [
        r for r in results if not (r.valid or (sanitize and r.sanitized_valid))
    ]

    if json_:
        out.json(
            [
                {
                    "name": r.name,
                    "valid": r.valid,
                    "sanitized": r.sanitized,
                    "sanitized_valid": r.sanitized_valid,
                }
                for r in results
            ]
        )
    else:
        out.names_table(results, title="Name check")

    if rejected:
        if not json_:
            out.error(f"{len(rejected)} invalid name(s).")
        raise typer.Exit(1)
