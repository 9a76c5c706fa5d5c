"""Check implementations."""

from auditrun.checks.base import Check, CheckState
from auditrun.checks.dns import DNSCheck
from auditrun.checks.github import GitHubOrganizationCheck
from auditrun.checks.registry import CheckFactory, CheckRegistry, default_registry

__all__ = [
    "Check",
    "CheckFactory",
    "CheckRegistry",
    "CheckState",
    "DNSCheck",
    "GitHubOrganizationCheck",
    "default_registry",
]
