"""Audit runner: turns a configured check list into an audit report."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from datetime import datetime

from auditrun.checks.base import Check
from auditrun.checks.registry import CheckRegistry, default_registry
from auditrun.core.errors import (
    CheckTimeout,
    ConfigurationError,
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

logger = logging.getLogger(__name__)

DEFAULT_CHECK_TIMEOUT = 60.0


def _describe_cause(error: BaseException) -> str | None:
    cause = error.__cause__
    if cause is None:
        return None
    return f"{type(cause).__name__}: {cause}"


def _failed(
    configuration: CheckConfiguration,
    kind: FailureKind,
    error: BaseException,
    cause: str | None = None,
    missing_keys: list[str] | None = None,
) -> CheckResult:
    return CheckResult(
        check_id=configuration.id,
        check_type=configuration.type,
        failure=CheckFailure(
            kind=kind,
            message=str(error),
            cause=cause,
            missing_keys=missing_keys or [],
        ),
    )


class AuditRunner:
    """Runs every configured check once and collects the outcomes.

    A failing check never stops the run: every configured entry gets exactly
    one result, in configuration order.
    """

    def __init__(
        self,
        registry: CheckRegistry,
        timeout: float | None = DEFAULT_CHECK_TIMEOUT,
        max_parallel: int = 1,
    ) -> None:
        """Initialize the runner.

        Args:
            registry: Lookup table of available check types.
            timeout: Per-check deadline in seconds, None to disable.
            max_parallel: Maximum number of checks executing at once.
        """
        if max_parallel < 1:
            raise ValueError(f"max_parallel must be at least 1, got {max_parallel}")
        self.registry = registry
        self.timeout = timeout
        self.max_parallel = max_parallel

    async def run(self, configurations: Sequence[CheckConfiguration]) -> AuditReport:
        """Run all configured checks.

        Args:
            configurations: Check entries in the order they should be reported.

        Returns:
            AuditReport with one result per entry.
        """
        started_at = datetime.now()
        logger.info(f"Running {len(configurations)} check(s) (max_parallel={self.max_parallel})")

        if self.max_parallel == 1:
            results = [await self.run_check(configuration) for configuration in configurations]
        else:
            semaphore = asyncio.Semaphore(self.max_parallel)

            async def bounded(configuration: CheckConfiguration) -> CheckResult:
                async with semaphore:
                    return await self.run_check(configuration)

            # gather keeps input order regardless of completion order
            results = list(await asyncio.gather(*(bounded(c) for c in configurations)))

        report = AuditReport(results=results, started_at=started_at, finished_at=datetime.now())
        logger.info(
            f"Audit finished: {report.total_issues} issue(s), "
            f"{len(report.failures)} failed check(s), "
            f"duration={report.duration_seconds:.2f}s"
        )
        return report

    async def run_check(self, configuration: CheckConfiguration) -> CheckResult:
        """Resolve, validate and execute a single configured check."""
        try:
            check = self.registry.create(configuration)
        except UnknownCheckType as e:
            logger.error(str(e))
            return _failed(configuration, FailureKind.UNKNOWN_CHECK_TYPE, e)
        except ConfigurationError as e:
            logger.error(f"Could not construct check '{configuration.id}': {e}")
            return _failed(configuration, FailureKind.CONFIGURATION_ERROR, e)
        except Exception as e:
            logger.exception(f"Could not construct check '{configuration.id}'")
            return _failed(configuration, FailureKind.EXECUTION_FAILURE, e, cause=f"{type(e).__name__}: {e}")

        if not check.is_configuration_complete():
            incomplete = IncompleteConfiguration(check.check_id, check.missing_options())
            logger.error(str(incomplete))
            return _failed(
                configuration,
                FailureKind.INCOMPLETE_CONFIGURATION,
                incomplete,
                missing_keys=incomplete.missing_keys,
            )

        logger.info(f"Starting {check.full_identifier}...")
        start_time = time.perf_counter()

        try:
            issues = await self._execute(check)
        except CheckTimeout as e:
            logger.error(str(e))
            return _failed(configuration, FailureKind.TIMEOUT, e)
        except ConfigurationError as e:
            logger.error(f"{check.full_identifier} has an invalid configuration: {e}")
            return _failed(configuration, FailureKind.CONFIGURATION_ERROR, e)
        except ExecutionFailure as e:
            logger.error(f"{check.full_identifier} failed: {e}")
            return _failed(configuration, FailureKind.EXECUTION_FAILURE, e, cause=_describe_cause(e))
        except Exception as e:
            logger.exception(f"{check.full_identifier} failed with an unexpected error")
            return _failed(configuration, FailureKind.EXECUTION_FAILURE, e, cause=f"{type(e).__name__}: {e}")

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"Completed {check.full_identifier}: found {len(issues)} issue(s), duration={duration_ms:.2f}ms")

        return CheckResult(check_id=configuration.id, check_type=configuration.type, issues=issues)

    async def _execute(self, check: Check) -> list[Issue]:
        if self.timeout is None:
            return await check.execute()
        try:
            async with asyncio.timeout(self.timeout) as deadline:
                return await check.execute()
        except TimeoutError as e:
            # a TimeoutError raised by the check itself is not our deadline
            if not deadline.expired():
                raise
            raise CheckTimeout(check.check_id, self.timeout) from e


def run_audit(
    configurations: Sequence[CheckConfiguration],
    registry: CheckRegistry | None = None,
    timeout: float | None = DEFAULT_CHECK_TIMEOUT,
    max_parallel: int = 1,
) -> AuditReport:
    """Run an audit synchronously with the built-in checks by default."""
    runner = AuditRunner(registry or default_registry(), timeout=timeout, max_parallel=max_parallel)
    return asyncio.run(runner.run(configurations))
