"""Error taxonomy for check configuration and execution.

Issues are not errors: a compliance finding is a successful check outcome.
Everything here describes a check that could not be evaluated at all.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum


class AuditError(Exception):
    """Base exception for audit framework errors."""


class ConfigurationErrorKind(str, Enum):
    """Why a configuration value could not be read."""

    MISSING = "missing"
    TYPE_MISMATCH = "type_mismatch"


class ConfigurationError(AuditError):
    """A check option is absent or has the wrong shape."""

    def __init__(self, key: str, kind: ConfigurationErrorKind, detail: str | None = None) -> None:
        self.key = key
        self.kind = kind
        if kind == ConfigurationErrorKind.MISSING:
            message = f"Missing configuration option '{key}'"
        else:
            message = f"Configuration option '{key}' has the wrong type"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnknownCheckType(AuditError):
    """The configured check type has no registered variant."""

    def __init__(self, check_type: str, check_id: str) -> None:
        self.check_type = check_type
        self.check_id = check_id
        super().__init__(f"Unknown check type '{check_type}' configured for check '{check_id}'")


class IncompleteConfiguration(AuditError):
    """A check is missing options it requires before it can run."""

    def __init__(self, check_id: str, missing_keys: Sequence[str]) -> None:
        self.check_id = check_id
        self.missing_keys = list(missing_keys)
        super().__init__(
            f"Configuration of check '{check_id}' is incomplete, missing: {', '.join(self.missing_keys)}"
        )


class ExecutionFailure(AuditError):
    """The external probe of a check could not complete.

    The underlying cause is chained with ``raise ExecutionFailure(...) from exc``.
    """


class CheckTimeout(ExecutionFailure):
    """A check did not finish within the runner's deadline."""

    def __init__(self, check_id: str, timeout: float) -> None:
        self.check_id = check_id
        self.timeout = timeout
        super().__init__(f"Check '{check_id}' timed out after {timeout:g} seconds")
