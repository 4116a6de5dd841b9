"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from catreg.cli.common.output import out
from catreg.core.errors import ConfigurationError, RegistrationError

# Exit code for configuration problems, matching click's usage-error code.
CONFIG_EXIT_CODE = 2


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Print an error message and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc


def exit_from_registration_error(exc: RegistrationError) -> NoReturn:
    """Exit with code 2 for configuration errors and 1 for everything else."""
    code = CONFIG_EXIT_CODE if isinstance(exc, ConfigurationError) else 1
    exit_from_exc(exc, message=str(exc), code=code)
