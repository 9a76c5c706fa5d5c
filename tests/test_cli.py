"""Unit tests for the auditrun CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import dns.rdata
import dns.rdataclass
import dns.rdatatype
import pytest
from typer.testing import CliRunner

from auditrun.checks.dns import DNSCheck
from auditrun.cli import app

runner = CliRunner()

DNS_CONFIG = """\
checks:
  - id: web
    type: dns
    dns_server: 8.8.8.8
    dns_question: www.example.org
    dns_question_type: A
    expected_answer: [1.2.3.4]
"""


def _a_record(address: str) -> dns.rdata.Rdata:
    return dns.rdata.from_text(dns.rdataclass.IN, dns.rdatatype.A, address)


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    path = temp_dir / "auditrun.yaml"
    path.write_text(DNS_CONFIG)
    return path


class TestRunCommand:
    """Tests for `auditrun run`."""

    def test_clean_run_exits_zero(self, config_path: Path) -> None:
        """A matching record passes."""
        with patch.object(DNSCheck, "_lookup", new_callable=AsyncMock) as mock_lookup:
            mock_lookup.return_value = [_a_record("1.2.3.4")]
            result = runner.invoke(app, ["run", str(config_path)])

        assert result.exit_code == 0
        assert "passed" in result.output

    def test_issues_exit_one_with_json(self, config_path: Path) -> None:
        """Issues are printed as JSON and fail the run."""
        with patch.object(DNSCheck, "_lookup", new_callable=AsyncMock) as mock_lookup:
            mock_lookup.return_value = [_a_record("1.2.3.4"), _a_record("5.6.7.8")]
            result = runner.invoke(app, ["run", str(config_path), "--format", "json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["passed"] is False
        assert data["summary"]["issues"] == 1
        assert data["results"][0]["check_id"] == "web"
        assert "Expected <1> DNS records but found <2>" in data["results"][0]["issues"][0]["text"]

    def test_text_output_lists_issues(self, config_path: Path) -> None:
        """Issue text is shown in text mode."""
        with patch.object(DNSCheck, "_lookup", new_callable=AsyncMock) as mock_lookup:
            mock_lookup.return_value = [_a_record("9.9.9.9")]
            result = runner.invoke(app, ["run", str(config_path)])

        assert result.exit_code == 1
        assert "Expected records [1.2.3.4] but found [9.9.9.9]." in result.output

    def test_attic_archives_report(self, config_path: Path, temp_dir: Path) -> None:
        """The report is written to the attic folder."""
        attic = temp_dir / "attic"
        with patch.object(DNSCheck, "_lookup", new_callable=AsyncMock) as mock_lookup:
            mock_lookup.return_value = [_a_record("1.2.3.4")]
            result = runner.invoke(app, ["run", str(config_path), "--attic", str(attic)])

        assert result.exit_code == 0
        archived = list(attic.glob("audit-*.json"))
        assert len(archived) == 1
        assert json.loads(archived[0].read_text())["passed"] is True

    def test_invalid_configuration(self, temp_dir: Path) -> None:
        """Duplicate check ids are a configuration error."""
        path = temp_dir / "dupes.yaml"
        path.write_text("checks:\n  - {id: a, type: dns}\n  - {id: a, type: dns}\n")

        result = runner.invoke(app, ["run", str(path)])

        assert result.exit_code == 2

    def test_no_checks_configured(self, temp_dir: Path) -> None:
        """An empty check list is rejected."""
        path = temp_dir / "empty.yaml"
        path.write_text("checks: []\n")

        result = runner.invoke(app, ["run", str(path)])

        assert result.exit_code == 2

    def test_missing_file(self, temp_dir: Path) -> None:
        """A non-existent configuration path is a usage error."""
        result = runner.invoke(app, ["run", str(temp_dir / "missing.yaml")])

        assert result.exit_code != 0


class TestChecksCommand:
    """Tests for `auditrun checks`."""

    def test_lists_registered_checks(self) -> None:
        """Built-in check types and their options are listed."""
        result = runner.invoke(app, ["checks"])

        assert result.exit_code == 0
        assert "dns" in result.output
        assert "github_organization" in result.output
        assert "dns_server" in result.output
