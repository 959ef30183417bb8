"""Tests for the report data models and JSON round trip."""

from __future__ import annotations

import io
import json

from rich.console import Console

from devdashboard.engines.report.console import build_table, render_console
from devdashboard.engines.report.models import Report, RepositoryJob, RepositoryResult


def _result(repository, dependencies=None, error=None):
    return RepositoryResult(
        provider="github",
        owner="acme",
        repository=repository,
        ref="main",
        analyzer_id="poetry",
        dependencies=dependencies or {},
        error=error,
    )


def _report():
    return Report.build(
        [
            _result("api", {"requests": "2.28.1", "pytest": "7.2.0"}),
            _result("web", {"requests": "2.31.0"}),
            _result("legacy", error="failed to find dependency files: failed to list files: 404"),
        ],
        ["pytest", "requests"],
    )


class TestRepositoryJob:
    def test_repo_id(self):
        job = RepositoryJob(provider="gitlab", owner="acme", repository="app", analyzer="uvlock")
        assert job.repo_id == "gitlab:acme/app@"
        assert job.identity == ("gitlab", "acme", "app", "")

    def test_for_job(self):
        job = RepositoryJob(
            provider="github", owner="acme", repository="app", analyzer="pipfile", ref="v2"
        )
        result = RepositoryResult.for_job(job)
        assert result.analyzer_id == "pipfile"
        assert result.ref == "v2"
        assert result.dependencies == {}
        assert result.succeeded


class TestReport:
    def test_summary(self):
        summary = _report().summary
        assert summary.repository_count == 3
        assert summary.package_count == 2
        assert summary.success_count == 2
        assert summary.error_count == 1

    def test_errors(self):
        report = _report()
        assert report.has_errors()
        assert list(report.errors()) == ["acme/legacy"]

    def test_package_versions(self):
        by_package = {pv.package: pv.versions for pv in _report().package_versions()}
        assert by_package["requests"] == {
            "2.28.1": ["acme/api"],
            "2.31.0": ["acme/web"],
            "": ["acme/legacy"],
        }
        assert by_package["pytest"] == {"7.2.0": ["acme/api"], "": ["acme/web", "acme/legacy"]}

    def test_json_uses_camel_case(self):
        data = json.loads(_report().to_json())
        assert data["summary"] == {
            "repositoryCount": 3,
            "packageCount": 2,
            "successCount": 2,
            "errorCount": 1,
        }
        first = data["repositories"][0]
        assert first["analyzerId"] == "poetry"
        assert first["error"] is None
        assert data["packages"] == ["pytest", "requests"]

    def test_json_with_errors_map(self):
        report = _report()
        data = json.loads(report.to_json(include_errors=True))
        assert data["errors"] == {
            "acme/legacy": "failed to find dependency files: failed to list files: 404"
        }
        assert Report.from_json(report.to_json(include_errors=True)) == report

    def test_json_round_trip(self):
        report = _report()
        assert Report.from_json(report.to_json(indent=2)) == report


class TestConsole:
    def _render(self, report, colors=False):
        buf = io.StringIO()
        render_console(report, Console(file=buf, width=200, no_color=True), colors=colors)
        return buf.getvalue()

    def test_table_and_summary(self):
        out = self._render(_report())
        assert "acme/api" in out
        assert "2.31.0" in out
        assert "ERR" in out
        assert "Repositories analyzed: 2/3 successful" in out
        assert "Packages tracked: 2" in out
        assert "Errors:" in out
        assert "failed to list files: 404" in out

    def test_missing_package_marker(self):
        table = build_table(_report(), colors=False)
        assert len(table.columns) == 4
        assert table.row_count == 2

    def test_no_errors_section(self):
        report = Report.build([_result("api", {"six": "1.16.0"})], ["six"])
        out = self._render(report)
        assert "Errors:" not in out
        assert "1/1 successful" in out
