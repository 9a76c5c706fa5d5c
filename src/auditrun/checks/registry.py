"""Lookup table from check type identifier to check factory."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType

from auditrun.checks.base import Check
from auditrun.core.errors import UnknownCheckType
from auditrun.core.models import CheckConfiguration

CheckFactory = Callable[[str, CheckConfiguration], Check]


class CheckRegistry:
    """Read-only mapping of check types to factories.

    Built once and handed to the runner; there is no process-wide registry.
    """

    def __init__(self, factories: Mapping[str, CheckFactory]) -> None:
        self._factories: Mapping[str, CheckFactory] = MappingProxyType(dict(factories))

    @classmethod
    def from_checks(cls, *check_classes: type[Check]) -> CheckRegistry:
        """Build a registry keyed by each class's ``check_type``.

        Raises:
            ValueError: If two classes share a check type.
        """
        factories: dict[str, CheckFactory] = {}
        for check_class in check_classes:
            if check_class.check_type in factories:
                raise ValueError(f"Duplicate check type '{check_class.check_type}'")
            factories[check_class.check_type] = check_class
        return cls(factories)

    @property
    def types(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, check_type: object) -> bool:
        return check_type in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self._factories)

    def get(self, check_type: str) -> CheckFactory | None:
        return self._factories.get(check_type)

    def create(self, configuration: CheckConfiguration) -> Check:
        """Construct the check described by ``configuration``.

        Raises:
            UnknownCheckType: If no variant is registered for the configured type.
        """
        factory = self._factories.get(configuration.type)
        if factory is None:
            raise UnknownCheckType(configuration.type, configuration.id)
        return factory(configuration.id, configuration)


def default_registry() -> CheckRegistry:
    """Return a registry with the built-in checks."""
    from auditrun.checks.dns import DNSCheck
    from auditrun.checks.github import GitHubOrganizationCheck

    return CheckRegistry.from_checks(DNSCheck, GitHubOrganizationCheck)
