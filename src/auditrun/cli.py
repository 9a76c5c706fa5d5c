"""CLI interface for auditrun."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from auditrun.checks.registry import default_registry
from auditrun.config import AuditConfig
from auditrun.core.models import AuditReport
from auditrun.core.report import exit_code, report_to_dict, save_report
from auditrun.core.runner import AuditRunner

app = typer.Typer(
    name="auditrun",
    help="Run compliance checks against live DNS and organization settings.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

EXIT_CONFIG_ERROR = 2


def _setup_logging(verbose: int) -> None:
    """Route log records to stderr through Rich."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _display_report(report: AuditReport) -> None:
    """Print a summary table and every issue or failure."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Check", style="cyan")
    table.add_column("Type")
    table.add_column("Status", width=10)
    table.add_column("Issues", justify="right")

    for result in report.results:
        if result.failure is not None:
            status = f"[red]{result.failure.kind.value}[/red]"
        elif result.issues:
            status = "[yellow]issues[/yellow]"
        else:
            status = "[green]ok[/green]"
        table.add_row(result.check_id, result.check_type, status, str(len(result.issues)))

    console.print()
    console.print(table)
    console.print()

    for result in report.results:
        for issue in result.issues:
            # Issue text is external data, keep Rich from parsing it as markup
            console.print(f"[yellow]![/yellow] [bold]{result.check_id}[/bold]: ", end="")
            console.print(issue.render(), markup=False, highlight=False)
        if result.failure is not None:
            console.print(f"[red]x[/red] [bold]{result.check_id}[/bold]: ", end="")
            console.print(result.failure.message, markup=False, highlight=False)
            if result.failure.cause:
                console.print(f"    caused by: {result.failure.cause}", markup=False, highlight=False)

    console.print()
    if report.passed:
        console.print(f"[bold green]All {len(report.results)} check(s) passed[/bold green]")
    else:
        console.print(
            f"[bold red]{report.total_issues} issue(s), {len(report.failures)} failed check(s)[/bold red]"
        )


@app.command()
def run(
    config_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the audit configuration YAML file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json"),
    ] = "text",
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Per-check timeout in seconds (overrides config)"),
    ] = None,
    parallel: Annotated[
        int | None,
        typer.Option("--parallel", "-p", min=1, help="Checks to run concurrently (overrides config)"),
    ] = None,
    attic: Annotated[
        Path | None,
        typer.Option("--attic", help="Folder to archive the JSON report in (overrides config)"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)"),
    ] = 0,
) -> None:
    """Run all configured checks and report issues."""
    _setup_logging(verbose)

    try:
        config = AuditConfig.load(config_path)
    except (yaml.YAMLError, ValidationError) as e:
        err_console.print(f"[red]Invalid configuration {config_path}:[/red]")
        err_console.print(str(e), markup=False)
        raise typer.Exit(EXIT_CONFIG_ERROR) from None

    if not config.is_complete():
        err_console.print(f"[red]No checks configured in {config_path}[/red]")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    runner = AuditRunner(
        default_registry(),
        timeout=timeout if timeout is not None else config.timeout,
        max_parallel=parallel if parallel is not None else config.max_parallel,
    )
    report = asyncio.run(runner.run(config.checks))

    attic_folder = attic or config.attic_folder
    if attic_folder is not None:
        report_path = save_report(report, attic_folder)
        err_console.print(f"[dim]Report archived to {report_path}[/dim]")

    if output_format == "json":
        # Use print directly to avoid Rich markup processing
        print(json.dumps(report_to_dict(report), indent=2))
    else:
        _display_report(report)

    code = exit_code(report)
    if code:
        raise typer.Exit(code)


@app.command()
def checks() -> None:
    """List available check types and their required options."""
    registry = default_registry()

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Type", style="cyan")
    table.add_column("Required options")

    for check_type in registry.types:
        factory = registry.get(check_type)
        required = getattr(factory, "required_options", ())
        table.add_row(check_type, ", ".join(required) or "-")

    console.print(table)


if __name__ == "__main__":
    app()
