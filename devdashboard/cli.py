"""CLI entry point: devdashboard.

Subcommands:
    devdashboard dependency-report repos.yaml                 # console table
    devdashboard dependency-report repos.yaml -f json -o r.json
    devdashboard analyzers                                    # list analyzer ids
    devdashboard version
"""

from __future__ import annotations

import asyncio
import io
import sys
from pathlib import Path

import click
import structlog
from rich.console import Console

from devdashboard import __version__
from devdashboard.core.config import load_config
from devdashboard.core.exceptions import ConfigError
from devdashboard.core.logging import setup_logging
from devdashboard.engines.dependency_analyzer.registry import default_registry
from devdashboard.engines.report.console import render_console
from devdashboard.engines.report.models import Report, RepositoryJob
from devdashboard.engines.report.orchestrator import ReportOrchestrator
from devdashboard.providers.factory import ProviderFactory

log = structlog.get_logger("devdashboard.cli")


async def _generate(jobs: list[RepositoryJob], timeout: float | None, workers: int | None) -> Report:
    async with ProviderFactory() as providers:
        orchestrator = ReportOrchestrator(
            default_registry(), providers.accessor_for, max_workers=workers
        )
        return await orchestrator.generate(jobs, timeout=timeout)


def _write_output(output_file: str, text: str) -> None:
    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable info logging")
@click.option("--debug", is_flag=True, help="Enable debug logging (overrides --verbose)")
def main(verbose: bool, debug: bool) -> None:
    """DevDashboard: cross-repository dependency version reports."""
    level = "DEBUG" if debug else "INFO" if verbose else None
    setup_logging(level)


@main.command("dependency-report")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format",
)
@click.option("-o", "--out", "output_file", default=None, help="Write output to file instead of stdout")
@click.option("--no-color", is_flag=True, help="Disable colors (console format)")
@click.option("--timeout", type=float, default=300.0, show_default=True, help="Deadline in seconds")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Concurrent repositories")
@click.option("--fail-on-error", is_flag=True, help="Exit non-zero if any repository failed")
@click.option("--json-indent", is_flag=True, help="Pretty-print JSON output")
@click.option("--json-include-errors", is_flag=True, help="Add an errors map to JSON output")
def dependency_report(
    config_file: str,
    output_format: str,
    output_file: str | None,
    no_color: bool,
    timeout: float,
    workers: int | None,
    fail_on_error: bool,
    json_indent: bool,
    json_include_errors: bool,
) -> None:
    """Generate a dependency version report for the repositories in CONFIG_FILE."""
    try:
        config = load_config(config_file)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    jobs = config.jobs()
    if not jobs:
        click.echo("Error: no repositories configured", err=True)
        sys.exit(1)

    log.info("cli.report", config=config_file, repositories=len(jobs))
    try:
        report = asyncio.run(_generate(jobs, timeout, workers))
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        if output_format == "json":
            text = report.to_json(
                indent=2 if json_indent else None, include_errors=json_include_errors
            )
            if output_file:
                _write_output(output_file, text + "\n")
            else:
                click.echo(text)
        elif output_file:
            buf = io.StringIO()
            render_console(report, Console(file=buf, no_color=True, width=200), colors=False)
            _write_output(output_file, buf.getvalue())
        else:
            render_console(report, Console(no_color=no_color), colors=not no_color)
    except OSError as e:
        click.echo(f"Error: failed to write output file: {e}", err=True)
        sys.exit(1)

    if fail_on_error and report.has_errors():
        sys.exit(1)


@main.command("analyzers")
def analyzers() -> None:
    """List the registered lock-file analyzers."""
    for name in default_registry().names():
        click.echo(name)


@main.command("version")
def version() -> None:
    """Show version information."""
    click.echo(f"DevDashboard version: {__version__}")


if __name__ == "__main__":
    main()
