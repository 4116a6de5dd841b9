"""Exception hierarchy for catalog registration.

All errors raised by the core are fatal configuration or input problems:
callers are expected to fix the configuration and try again, never to retry
the same call.
"""

from __future__ import annotations


class RegistrationError(Exception):
    """Base class for every error raised while building registration specs."""


class ConfigurationError(RegistrationError, ValueError):
    """Raised when a configuration value is present but unusable."""


class ConfigurationMissingError(ConfigurationError):
    """Raised when none of the required configuration keys is set."""

    def __init__(self, message: str, *, keys: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.keys = keys


class PatternMatchError(ConfigurationMissingError):
    """Raised when a configured regex yields no first capture group for a path."""

    def __init__(self, message: str, *, key: str, path: str) -> None:
        super().__init__(message, keys=(key,))
        self.key = key
        self.path = path


class InvalidIdentifierError(RegistrationError, ValueError):
    """Raised when a database or table name is not a valid catalog identifier."""

    def __init__(self, message: str, *, name: str) -> None:
        super().__init__(message)
        self.name = name


class PolicyResolutionError(RegistrationError, RuntimeError):
    """Raised when a registration policy cannot be looked up or constructed."""

    def __init__(self, message: str, *, policy_type: str) -> None:
        super().__init__(message)
        self.policy_type = policy_type
