"""Batch helpers over a registration policy.

The policy itself is all-or-nothing per path. These helpers run it over many
paths (or names) and keep going, recording per-item errors so a frontend can
report everything in one pass.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable

from catreg.core.errors import RegistrationError
from catreg.core.models import RegistrationSpec
from catreg.core.names import is_valid_name, path_str, sanitize_name
from catreg.core.policy import RegistrationPolicy


@dataclass(frozen=True)
class PlanResult:
    """Registration specs (or the error) for a single path."""

    path: str
    specs: list[RegistrationSpec] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class NameCheckResult:
    """Validation outcome for a single candidate name."""

    name: str
    valid: bool
    sanitized: str
    sanitized_valid: bool


def plan_registrations(
    policy: RegistrationPolicy,
    paths: Iterable[str | os.PathLike[str]],
) -> list[PlanResult]:
    """Build registration specs for each path, collecting per-path errors."""
    results: list[PlanResult] = []
    for path in paths:
        try:
            specs = policy.get_registration_specs(path)
        except RegistrationError as e:
            results.append(PlanResult(path=path_str(path), error=str(e)))
            continue
        results.append(PlanResult(path=path_str(path), specs=specs))
    return results


def check_names(names: Iterable[str]) -> list[NameCheckResult]:
    """Report whether each name is valid, and what sanitizing would make of it."""
    results: list[NameCheckResult] = []
    for name in names:
        lowered = name.lower()
        sanitized = sanitize_name(lowered)
        results.append(
            NameCheckResult(
                name=name,
                valid=is_valid_name(lowered),
                sanitized=sanitized,
                sanitized_valid=is_valid_name(sanitized),
            )
        )
    return results
