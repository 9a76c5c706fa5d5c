"""Report serialization, archiving and exit status."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from auditrun.core.models import AuditReport, CheckResult, Issue

logger = logging.getLogger(__name__)


def _issue_to_dict(issue: Issue) -> dict[str, Any]:
    return {
        "check_id": issue.check_id,
        "check_type": issue.check_type,
        "message": issue.message,
        "args": [str(arg) for arg in issue.args],
        "text": issue.render(),
    }


def _result_to_dict(result: CheckResult) -> dict[str, Any]:
    failure = None
    if result.failure is not None:
        failure = {
            "kind": result.failure.kind.value,
            "message": result.failure.message,
            "missing_keys": result.failure.missing_keys,
            "cause": result.failure.cause,
        }
    return {
        "check_id": result.check_id,
        "check_type": result.check_type,
        "issues": [_issue_to_dict(issue) for issue in result.issues],
        "failure": failure,
    }


def report_to_dict(report: AuditReport) -> dict[str, Any]:
    """Convert a report to plain JSON-compatible data."""
    return {
        "passed": report.passed,
        "started_at": report.started_at.isoformat(),
        "finished_at": report.finished_at.isoformat() if report.finished_at else None,
        "summary": {
            "checks": len(report.results),
            "issues": report.total_issues,
            "failures": len(report.failures),
        },
        "results": [_result_to_dict(result) for result in report.results],
    }


def save_report(report: AuditReport, attic_folder: Path) -> Path:
    """Archive a report as JSON in ``attic_folder``.

    Returns:
        Path of the written file.
    """
    attic_folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")
    report_path = attic_folder / f"audit-{timestamp}.json"
    report_path.write_text(json.dumps(report_to_dict(report), indent=2), encoding="utf-8")
    logger.info(f"Archived audit report to {report_path}")
    return report_path


def exit_code(report: AuditReport) -> int:
    """Return 0 for a clean report, 1 if any issue or failure is present."""
    return 0 if report.passed else 1
