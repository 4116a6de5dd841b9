"""Registration policy lookup.

Policies are looked up by the symbolic name stored under
`registration.policy`. Built-in variants are registered when this module is
imported; other packages add their own with `register_policy`.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Mapping

from catreg.core.config import REGISTRATION_POLICY, RegistrationConfig, as_config
from catreg.core.errors import ConfigurationMissingError, PolicyResolutionError
from catreg.core.layouts import ParentDirectoryLayout, PartitionedLayout
from catreg.core.policy import RegistrationPolicy

logger = logging.getLogger(__name__)

PolicyFactory = Callable[[RegistrationConfig], RegistrationPolicy]


class PolicyRegistry:
    """Thread-safe mapping of policy names to policy factories."""

    def __init__(self) -> None:
        self._factories: dict[str, PolicyFactory] = {}
        self._lock = threading.Lock()

    def register(
        self, name: str, factory: PolicyFactory, *, replace: bool = False
    ) -> None:
        """
        Register a factory under `name`.

        Args:
            name: Symbolic policy name, as used in `registration.policy`.
            factory: Callable taking the configuration and returning a policy.
            replace: Allow overwriting an existing registration.

        Raises:
            ValueError: If the name is empty or already taken.
        """
        name = name.strip()
        if not name:
            raise ValueError("Policy name must not be empty")
        with self._lock:
            if name in self._factories and not replace:
                raise ValueError(f"Policy '{name}' is already registered")
            self._factories[name] = factory

    def unregister(self, name: str) -> None:
        with self._lock:
            self._factories.pop(name, None)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._factories

    def create(self, name: str, config: RegistrationConfig) -> RegistrationPolicy:
        """Instantiate the policy registered under `name`."""
        with self._lock:
            factory = self._factories.get(name)
        if factory is None:
            raise PolicyResolutionError(
                f"Unable to instantiate RegistrationPolicy with type {name}: "
                f"unknown policy (registered: {', '.join(self.names())})",
                policy_type=name,
            )
        try:
            policy = factory(config)
        except Exception as exc:
            raise PolicyResolutionError(
                f"Unable to instantiate RegistrationPolicy with type {name}: {exc}",
                policy_type=name,
            ) from exc
        if not isinstance(policy, RegistrationPolicy):
            raise PolicyResolutionError(
                f"Unable to instantiate RegistrationPolicy with type {name}: "
                f"factory returned {type(policy).__name__}",
                policy_type=name,
            )
        return policy


registry = PolicyRegistry()


def register_policy(
    name: str, *, replace: bool = False
) -> Callable[[PolicyFactory], PolicyFactory]:
    """Decorator registering a policy factory (or policy class) in the default registry."""

    def decorator(factory: PolicyFactory) -> PolicyFactory:
        registry.register(name, factory, replace=replace)
        return factory

    return decorator


def get_policy(
    config: Mapping[str, str] | None,
    *,
    policies: PolicyRegistry | None = None,
) -> RegistrationPolicy:
    """
    Get a registration policy from a configuration.

    The configuration must contain `registration.policy`, the name of a
    registered policy. A new policy is built on every call.

    Raises:
        ConfigurationMissingError: If `registration.policy` is not set.
        PolicyResolutionError: If the policy is unknown or fails to build.
    """
    config = as_config(config)
    if REGISTRATION_POLICY not in config:
        raise ConfigurationMissingError(
            f"Missing required property {REGISTRATION_POLICY}",
            keys=(REGISTRATION_POLICY,),
        )
    policy_type = config[REGISTRATION_POLICY].strip()
    logger.debug("Resolving registration policy '%s'", policy_type)
    return (policies or registry).create(policy_type, config)


@register_policy("base")
def _base_policy(config: RegistrationConfig) -> RegistrationPolicy:
    return RegistrationPolicy(config)


@register_policy("parent_directory")
def _parent_directory_policy(config: RegistrationConfig) -> RegistrationPolicy:
    return RegistrationPolicy(config, layout=ParentDirectoryLayout())


@register_policy("partitioned")
def _partitioned_policy(config: RegistrationConfig) -> RegistrationPolicy:
    return RegistrationPolicy(config, layout=PartitionedLayout.from_config(config))
