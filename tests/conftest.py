"""Shared fixtures for auditrun tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import ClassVar

import httpx
import pytest

from auditrun.checks.base import Check
from auditrun.checks.registry import CheckRegistry
from auditrun.core.errors import ExecutionFailure
from auditrun.core.models import CheckConfiguration
from auditrun.core.options import require_list_of_strings, require_string


class StaticCheck(Check):
    """Emits one issue per configured finding."""

    check_type: ClassVar[str] = "static"
    required_options: ClassVar[tuple[str, ...]] = ("owner",)

    async def _check(self) -> None:
        owner = require_string(self.options, "owner")
        for finding in require_list_of_strings(self.options, "findings"):
            self.add_issue("{} reported: {}", owner, finding)


class UnreachableCheck(Check):
    """Fails like a probe whose target is down."""

    check_type: ClassVar[str] = "unreachable"

    async def _check(self) -> None:
        try:
            raise httpx.ConnectError("connection refused")
        except httpx.ConnectError as e:
            raise ExecutionFailure("Could not reach probe target") from e


class SlowCheck(Check):
    """Sleeps for the configured delay."""

    check_type: ClassVar[str] = "slow"

    async def _check(self) -> None:
        await asyncio.sleep(float(self.options.get("delay", 0)))
        self.add_issue("Slow check finished")


class SocketTimeoutCheck(Check):
    """Fails with a TimeoutError of its own, well inside any runner deadline."""

    check_type: ClassVar[str] = "socket_timeout"

    async def _check(self) -> None:
        raise TimeoutError("socket read timed out")


class BuggyCheck(Check):
    """Raises an error the framework does not classify."""

    check_type: ClassVar[str] = "buggy"

    async def _check(self) -> None:
        raise KeyError("oops")


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary directory for test files."""
    return tmp_path


@pytest.fixture
def registry() -> CheckRegistry:
    """Registry with the test check variants."""
    return CheckRegistry.from_checks(StaticCheck, UnreachableCheck, SlowCheck, BuggyCheck, SocketTimeoutCheck)


@pytest.fixture
def make_config():
    """Factory for flat check configuration entries."""

    def _make(check_id: str, check_type: str, **options: object) -> CheckConfiguration:
        return CheckConfiguration.model_validate({"id": check_id, "type": check_type, **options})

    return _make
