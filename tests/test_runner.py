"""Unit tests for the audit runner."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from auditrun.checks.registry import CheckRegistry
from auditrun.core.models import FailureKind
from auditrun.core.runner import AuditRunner, run_audit


class TestAuditRunner:
    """Tests for AuditRunner."""

    @pytest.mark.asyncio
    async def test_one_result_per_entry_in_order(self, registry: CheckRegistry, make_config) -> None:
        """Every entry gets a result in configuration order, whatever its outcome."""
        configs = [
            make_config("first", "static", owner="ops", findings=["x"]),
            make_config("second", "ldap"),
            make_config("third", "static"),
            make_config("fourth", "unreachable"),
            make_config("fifth", "static", owner="ops"),
        ]
        runner = AuditRunner(registry)

        report = await runner.run(configs)

        assert [r.check_id for r in report.results] == ["first", "second", "third", "fourth", "fifth"]
        assert [r.check_type for r in report.results] == ["static", "ldap", "static", "unreachable", "static"]
        assert report.finished_at is not None

    @pytest.mark.asyncio
    async def test_empty_configuration(self, registry: CheckRegistry) -> None:
        """No checks yields an empty, passing report."""
        report = await AuditRunner(registry).run([])

        assert report.results == []
        assert report.passed

    @pytest.mark.asyncio
    async def test_zero_issues_is_success(self, registry: CheckRegistry, make_config) -> None:
        """A check without findings passes."""
        report = await AuditRunner(registry).run([make_config("clean", "static", owner="ops")])

        result = report.results[0]
        assert result.issues == []
        assert result.failure is None
        assert report.passed

    @pytest.mark.asyncio
    async def test_issues_recorded(self, registry: CheckRegistry, make_config) -> None:
        """Issues from a successful check are recorded on its result."""
        report = await AuditRunner(registry).run([make_config("dirty", "static", owner="ops", findings=["a", "b"])])

        result = report.results[0]
        assert [i.render() for i in result.issues] == ["ops reported: a", "ops reported: b"]
        assert result.failure is None
        assert not report.passed

    @pytest.mark.asyncio
    async def test_unknown_type_recorded(self, registry: CheckRegistry, make_config) -> None:
        """An unknown type becomes a failure entry and the run continues."""
        report = await AuditRunner(registry).run(
            [make_config("mystery", "ldap"), make_config("after", "static", owner="ops")]
        )

        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.UNKNOWN_CHECK_TYPE
        assert "ldap" in failure.message
        assert "mystery" in failure.message
        assert report.results[1].passed

    @pytest.mark.asyncio
    async def test_incomplete_configuration_never_executes(self, registry: CheckRegistry, make_config) -> None:
        """Incomplete checks are reported without calling execute."""
        static_check = registry.get("static")
        with patch.object(static_check, "_check", new_callable=AsyncMock) as mock_check:
            report = await AuditRunner(registry).run([make_config("no-owner", "static", owner="")])

        mock_check.assert_not_called()
        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.INCOMPLETE_CONFIGURATION
        assert failure.missing_keys == ["owner"]
        assert "owner" in failure.message

    @pytest.mark.asyncio
    async def test_lazy_configuration_error(self, registry: CheckRegistry, make_config) -> None:
        """A wrongly typed option discovered during execution is a configuration error."""
        report = await AuditRunner(registry).run([make_config("bad", "static", owner="ops", findings="not-a-list")])

        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.CONFIGURATION_ERROR
        assert "findings" in failure.message

    @pytest.mark.asyncio
    async def test_transport_failure_isolated(self, registry: CheckRegistry, make_config) -> None:
        """A probe failure is recorded and later checks still run."""
        report = await AuditRunner(registry).run(
            [
                make_config("down", "unreachable"),
                make_config("after", "static", owner="ops", findings=["still ran"]),
            ]
        )

        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.EXECUTION_FAILURE
        assert failure.message == "Could not reach probe target"
        assert failure.cause == "ConnectError: connection refused"
        assert [i.render() for i in report.results[1].issues] == ["ops reported: still ran"]

    @pytest.mark.asyncio
    async def test_unexpected_error_isolated(self, registry: CheckRegistry, make_config) -> None:
        """Errors the check did not classify are isolated too."""
        report = await AuditRunner(registry).run(
            [make_config("broken", "buggy"), make_config("after", "static", owner="ops")]
        )

        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.EXECUTION_FAILURE
        assert failure.cause is not None
        assert failure.cause.startswith("KeyError")
        assert report.results[1].passed

    @pytest.mark.asyncio
    async def test_timeout(self, registry: CheckRegistry, make_config) -> None:
        """A check exceeding the deadline is cancelled and reported."""
        runner = AuditRunner(registry, timeout=0.05)

        report = await runner.run([make_config("sleepy", "slow", delay=5), make_config("quick", "slow", delay=0)])

        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.TIMEOUT
        assert "sleepy" in failure.message
        assert report.results[1].failure is None
        assert len(report.results[1].issues) == 1

    @pytest.mark.asyncio
    async def test_check_raised_timeout_is_execution_failure(self, registry: CheckRegistry, make_config) -> None:
        """A TimeoutError from the check itself keeps its cause and is not a runner timeout."""
        runner = AuditRunner(registry, timeout=60)

        report = await runner.run([make_config("socket", "socket_timeout"), make_config("after", "slow", delay=0)])

        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.EXECUTION_FAILURE
        assert failure.cause == "TimeoutError: socket read timed out"
        assert "timed out after" not in failure.message
        assert report.results[1].failure is None

    @pytest.mark.asyncio
    async def test_parallel_keeps_configuration_order(self, registry: CheckRegistry, make_config) -> None:
        """Concurrent runs report in configuration order, not completion order."""
        configs = [
            make_config("slowest", "slow", delay=0.2),
            make_config("slower", "slow", delay=0.1),
            make_config("fast", "slow", delay=0),
        ]
        runner = AuditRunner(registry, timeout=None, max_parallel=3)

        report = await runner.run(configs)

        assert [r.check_id for r in report.results] == ["slowest", "slower", "fast"]
        assert all(r.failure is None for r in report.results)

    def test_invalid_parallelism(self, registry: CheckRegistry) -> None:
        """At least one check must be allowed to run."""
        with pytest.raises(ValueError, match="max_parallel"):
            AuditRunner(registry, max_parallel=0)


class TestRunAudit:
    """Tests for the synchronous wrapper."""

    def test_run_audit(self, registry: CheckRegistry, make_config) -> None:
        """run_audit returns a finished report."""
        report = run_audit([make_config("clean", "static", owner="ops")], registry=registry)

        assert len(report.results) == 1
        assert report.passed

    def test_run_audit_default_registry(self, make_config) -> None:
        """The built-in registry is used by default."""
        report = run_audit([make_config("mx", "dns")])

        failure = report.results[0].failure
        assert failure is not None
        assert failure.kind == FailureKind.INCOMPLETE_CONFIGURATION
        assert failure.missing_keys == ["dns_server", "dns_question", "dns_question_type"]
