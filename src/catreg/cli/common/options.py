"""Common CLI options for the CLI."""

import typer

from catreg.core.config import CONFIG_ENV

ConfigOpt = typer.Option(
    None,
    "--config",
    "-c",
    envvar=CONFIG_ENV,
    help="Registration config file (.properties or .json)",
)

SetOpt = typer.Option(
    [],
    "--set",
    "-s",
    help="Config override (key=value). This is reusable.",
    show_default=False,
)

PolicyOpt = typer.Option(
    None,
    "--policy",
    "-p",
    help="Registration policy name (overrides registration.policy)",
)

JsonOpt = typer.Option(
    False,
    "--json",
    help="Print results as JSON instead of tables",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging",
)
