"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from catreg.cli.common.tui_style import QUESTIONARY_STYLE_SELECT

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def setup_logging(verbose: bool) -> None:
    """Route `catreg` log records through rich; DEBUG when verbose."""
    handler = RichHandler(
        console=Console(stderr=True), show_path=False, show_time=False
    )
    logger = logging.getLogger("catreg")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "instruction"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be consistent."""
        return f"[catreg] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {escape(msg)}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {escape(msg)}", highlight=False)

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {escape(str(v))}", highlight=False)

    def json(self, payload: Any) -> None:
        """Print plain JSON (no markup) so the output stays machine-readable."""
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))

    def select_one(self, message: str, choices: list[str]) -> str | None:
        """
        Prompt the user to select a single item from a list (radio list).

        Returns:
            The selected value, or None if cancelled.
        """
        if not choices:
            return None

        prompt = self._q_try(
            questionary.select,
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓ then Enter",
            pointer="❯",
        )
        return prompt.ask()

    def specs_table(self, results: Iterable[Any], title: str = "Registration specs") -> None:
        """
        Render registration specs per path.

        Expects objects with `.path`, `.specs` (RegistrationSpec list) and
        optional `.error` (like catreg.core.planning.PlanResult).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Path", style="meta", overflow="fold")
        t.add_column("Table", style="ok", overflow="fold")
        t.add_column("Location", overflow="fold")
        t.add_column("Partition", style="meta", overflow="fold")
        t.add_column("Format", style="meta")

        for r in results:
            error = getattr(r, "error", None)
            if error:
                t.add_row(escape(r.path), f"[err]FAIL[/] {escape(error)}", "", "", "")
                continue
            for spec in r.specs:
                partition = spec.partition.spec if spec.partition else ""
                t.add_row(
                    escape(spec.path),
                    spec.table.full_name,
                    escape(spec.table.location),
                    escape(partition),
                    spec.table.serde.name,
                )

        console.print(t)

    def policies_table(self, names: Iterable[str], title: str = "Policies") -> None:
        """Render the registered policy names."""
        t = Table(title=title, show_lines=False)
        t.add_column("Policy", style="ok")

        for name in names:
            t.add_row(name)

        console.print(t)

    def names_table(self, results: Iterable[Any], title: str = "Names") -> None:
        """
        Render name validation results.

        Expects objects with `.name`, `.valid`, `.sanitized`, `.sanitized_valid`
        (like catreg.core.planning.NameCheckResult).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", overflow="fold")
        t.add_column("Valid")
        t.add_column("Sanitized", style="meta", overflow="fold")
        t.add_column("Sanitized valid")

        for r in results:
            t.add_row(
                escape(r.name),
                "[ok]yes[/]" if r.valid else "[err]no[/]",
                r.sanitized,
                "[ok]yes[/]" if r.sanitized_valid else "[err]no[/]",
            )

        console.print(t)


out = Out()
