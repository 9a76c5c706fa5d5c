"""Core data models for auditrun."""

from __future__ import annotations

import string
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_RESERVED_KEYS = ("id", "type")


# =============================================================================
# Configuration Models
# =============================================================================


class CheckConfiguration(BaseModel):
    """One entry of the configured check list.

    Accepts the flat on-disk layout where ``id`` and ``type`` sit next to
    the type specific options; everything that is not ``id`` or ``type``
    becomes an option.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_options(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # YAML reads ids such as 2024 as integers
        if isinstance(data.get("id"), int) and not isinstance(data.get("id"), bool):
            data["id"] = str(data["id"])
        # an option that happens to be called "options" is still an option
        if not isinstance(data.get("options"), dict):
            lifted = {key: data[key] for key in _RESERVED_KEYS if key in data}
            lifted["options"] = {key: value for key, value in data.items() if key not in _RESERVED_KEYS}
            return lifted
        return data


# =============================================================================
# Finding Models
# =============================================================================


class Issue(BaseModel):
    """A compliance deviation found by a check.

    ``message`` is a template with positional ``{}`` placeholders, one per
    entry in ``args``.
    """

    model_config = ConfigDict(frozen=True)

    check_id: str
    check_type: str
    message: str
    args: tuple[Any, ...] = ()

    @model_validator(mode="after")
    def _placeholders_match_args(self) -> Issue:
        fields = [name for _, name, _, _ in string.Formatter().parse(self.message) if name is not None]
        if any(fields):
            raise ValueError(f"Issue template must use positional '{{}}' placeholders only: {self.message!r}")
        if len(fields) != len(self.args):
            raise ValueError(
                f"Issue template expects {len(fields)} argument(s) but got {len(self.args)}: {self.message!r}"
            )
        return self

    def render(self) -> str:
        """Return the message with its arguments substituted."""
        return self.message.format(*self.args)

    def __str__(self) -> str:
        return self.render()


# =============================================================================
# Report Models
# =============================================================================


class FailureKind(str, Enum):
    """Why a configured check produced no verdict."""

    UNKNOWN_CHECK_TYPE = "unknown_check_type"
    INCOMPLETE_CONFIGURATION = "incomplete_configuration"
    CONFIGURATION_ERROR = "configuration_error"
    EXECUTION_FAILURE = "execution_failure"
    TIMEOUT = "timeout"


class CheckFailure(BaseModel):
    """A check that could not be evaluated."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str
    missing_keys: list[str] = Field(default_factory=list)
    cause: str | None = None


class CheckResult(BaseModel):
    """Outcome of one configured check."""

    check_id: str
    check_type: str
    issues: list[Issue] = Field(default_factory=list)
    failure: CheckFailure | None = None

    @property
    def failed(self) -> bool:
        return self.failure is not None

    @property
    def passed(self) -> bool:
        return self.failure is None and not self.issues


class AuditReport(BaseModel):
    """Outcome of one audit run, one result per configured check in order."""

    results: list[CheckResult] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def issues(self) -> list[Issue]:
        return [issue for result in self.results for issue in result.issues]

    @property
    def failures(self) -> list[CheckResult]:
        return [result for result in self.results if result.failed]

    @property
    def total_issues(self) -> int:
        return sum(len(result.issues) for result in self.results)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def duration_seconds(self) -> float | None:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
