"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from catreg.cli.common.exits import exit_from_registration_error
from catreg.core.config import (
    RegistrationConfig,
    load_config,
    parse_overrides,
)
from catreg.core.errors import RegistrationError


@dataclass
class PolicyOptions:
    """Group-level options, kept raw until a command needs the config."""

    config_path: Path | None
    overrides: list[str]


@dataclass
class PolicyAppContext:
    """Application context holding the loaded registration configuration."""

    config_path: Path | None
    config: RegistrationConfig


def build_policy_context(
    config_path: Path | None, overrides: list[str]
) -> PolicyAppContext:
    """Load the config file (if any) and apply `--set` overrides on top."""
    try:
        config = load_config(config_path) if config_path else RegistrationConfig()
        config = config.with_overrides(parse_overrides(overrides))
    except RegistrationError as exc:
        exit_from_registration_error(exc)
    return PolicyAppContext(config_path=config_path, config=config)
