"""Configuration management for auditrun."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from auditrun.core.models import CheckConfiguration

DEFAULT_CONFIG_PATH = Path("auditrun.yaml")


class AuditConfig(BaseModel):
    """Audit configuration: runner settings and the ordered check list."""

    checks: list[CheckConfiguration] = Field(default_factory=list, description="Checks to run, in report order")
    attic_folder: Path | None = Field(default=None, description="Folder to archive JSON reports in")
    timeout: float | None = Field(default=60.0, description="Per-check deadline in seconds (null disables it)")
    max_parallel: int = Field(default=1, ge=1, description="Maximum number of checks running at once")

    @field_validator("checks")
    @classmethod
    def _unique_check_ids(cls, checks: list[CheckConfiguration]) -> list[CheckConfiguration]:
        seen: set[str] = set()
        duplicates: list[str] = []
        for check in checks:
            if check.id in seen and check.id not in duplicates:
                duplicates.append(check.id)
            seen.add(check.id)
        if duplicates:
            raise ValueError(f"Duplicate check id(s): {', '.join(duplicates)}")
        return checks

    def is_complete(self) -> bool:
        """Whether there is anything to audit."""
        return bool(self.checks)

    @classmethod
    def load(cls, config_path: Path | None = None) -> AuditConfig:
        """Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            pydantic.ValidationError: If the content is malformed.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)
