"""CLI application for catalog registration policies."""

import typer

from catreg.cli.commands.names import names_app
from catreg.cli.commands.policy import policy_app
from catreg.cli.common.options import VerboseOpt
from catreg.cli.common.output import setup_logging

app = typer.Typer(
    help="catreg - catalog registration policy tooling",
    no_args_is_help=True,
)


@app.callback()
def _main(verbose: bool = VerboseOpt):
    """Configure logging for all commands."""
    setup_logging(verbose)


app.add_typer(
    policy_app, name="policy", help="Resolve policies and preview registration specs."
)
app.add_typer(names_app, name="names", help="Check database and table names.")


if __name__ == "__main__":
    app()
