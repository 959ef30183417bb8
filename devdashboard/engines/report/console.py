"""Rich terminal rendering of a dependency report."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from devdashboard.engines.report.models import Report, RepositoryResult

_MISSING = "-"
_ERROR = "ERR"


def _version_cell(repo: RepositoryResult, package: str, colors: bool) -> str:
    if repo.error is not None and not repo.dependencies:
        return f"[red]{_ERROR}[/red]" if colors else _ERROR
    version = repo.dependencies.get(package)
    if version is None:
        return f"[dim]{_MISSING}[/dim]" if colors else _MISSING
    return version


def build_table(report: Report, colors: bool = True) -> Table:
    """Package rows × repository columns."""
    table = Table(show_lines=False)
    table.add_column("Package", style="bold" if colors else None, no_wrap=True)
    for repo in report.repositories:
        table.add_column(repo.identifier, overflow="fold")

    for package in sorted(report.packages):
        table.add_row(
            package, *(_version_cell(repo, package, colors) for repo in report.repositories)
        )
    return table


def render_console(report: Report, console: Console, colors: bool = True) -> None:
    """Print the table, a summary and any repository errors."""
    console.print(build_table(report, colors))

    summary = report.summary
    console.print()
    console.print("Summary:")
    console.print(
        f"  Repositories analyzed: {summary.success_count}/{summary.repository_count} successful"
    )
    console.print(f"  Packages tracked: {summary.package_count}")

    if report.has_errors():
        console.print()
        console.print("[red]Errors:[/red]" if colors else "Errors:")
        for name, error in report.errors().items():
            console.print(f"  {name:<30} {error}", markup=False, highlight=False)
