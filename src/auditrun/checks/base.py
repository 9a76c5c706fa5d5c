"""Base check interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any, ClassVar

from auditrun.core.models import CheckConfiguration, Issue
from auditrun.core.options import is_complete, missing_keys


class CheckState(str, Enum):
    """Lifecycle of a single check instance."""

    CONSTRUCTED = "constructed"
    CONFIG_VALIDATED = "config_validated"
    EXECUTED = "executed"
    EXECUTION_FAILED = "execution_failed"


class Check(ABC):
    """Abstract base class for checks.

    Subclasses set ``check_type`` and ``required_options`` and implement
    ``_check``, calling ``add_issue`` for every deviation they find.
    """

    check_type: ClassVar[str]
    required_options: ClassVar[tuple[str, ...]] = ()

    def __init__(self, check_id: str, configuration: CheckConfiguration) -> None:
        self.check_id = check_id
        self.configuration = configuration
        self.state = CheckState.CONSTRUCTED
        self._issues: list[Issue] = []

    @property
    def type_identifier(self) -> str:
        return self.check_type

    @property
    def full_identifier(self) -> str:
        """Type and id, e.g. ``dns.mail-mx``."""
        return f"{self.check_type}.{self.check_id}"

    @property
    def options(self) -> Mapping[str, Any]:
        return self.configuration.options

    @property
    def issues(self) -> list[Issue]:
        return list(self._issues)

    def missing_options(self) -> list[str]:
        """Return the required options that are absent or empty."""
        return missing_keys(self.options, self.required_options)

    def is_configuration_complete(self) -> bool:
        """Check that every required option is present."""
        complete = is_complete(self.options, self.required_options)
        if complete and self.state == CheckState.CONSTRUCTED:
            self.state = CheckState.CONFIG_VALIDATED
        return complete

    async def execute(self) -> list[Issue]:
        """Run the check once and return the issues it found.

        Raises:
            RuntimeError: If the configuration was not validated first or the
                check already ran.
        """
        if self.state != CheckState.CONFIG_VALIDATED:
            raise RuntimeError(f"Check {self.full_identifier} cannot execute from state '{self.state.value}'")

        try:
            await self._check()
        except BaseException:
            self.state = CheckState.EXECUTION_FAILED
            raise

        self.state = CheckState.EXECUTED
        return self.issues

    def add_issue(self, message: str, *args: Any) -> Issue:
        """Record an issue attributed to this check."""
        issue = Issue(check_id=self.check_id, check_type=self.check_type, message=message, args=args)
        self._issues.append(issue)
        return issue

    @abstractmethod
    async def _check(self) -> None:
        """Observe the external state and record deviations."""
