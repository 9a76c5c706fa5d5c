"""Compliance audit runner: executes configured checks and reports findings."""

from auditrun.checks.registry import CheckRegistry, default_registry
from auditrun.core.models import AuditReport, CheckConfiguration, CheckResult, Issue
from auditrun.core.runner import AuditRunner, run_audit

__version__ = "0.1.0"

__all__ = [
    "AuditReport",
    "AuditRunner",
    "CheckConfiguration",
    "CheckRegistry",
    "CheckResult",
    "Issue",
    "default_registry",
    "run_audit",
]
