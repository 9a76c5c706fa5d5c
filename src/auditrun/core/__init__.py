"""Core audit models, errors and the runner."""

from auditrun.core.errors import (
    AuditError,
    CheckTimeout,
    ConfigurationError,
    ConfigurationErrorKind,
    ExecutionFailure,
    IncompleteConfiguration,
    UnknownCheckType,
)
from auditrun.core.models import (
    AuditReport,
    CheckConfiguration,
    CheckFailure,
    CheckResult,
    FailureKind,
    Issue,
)

__all__ = [
    "AuditError",
    "AuditReport",
    "CheckConfiguration",
    "CheckFailure",
    "CheckResult",
    "CheckTimeout",
    "ConfigurationError",
    "ConfigurationErrorKind",
    "ExecutionFailure",
    "FailureKind",
    "IncompleteConfiguration",
    "Issue",
    "UnknownCheckType",
]
