"""Report data models — repository jobs in, an aggregated report out."""

from __future__ import annotations

import json
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class RepositoryJob:
    """One repository's unit of report work.

    *paths* are explicit lock-file paths (explicit-path mode when non-empty);
    *search_paths* scope auto-search; *packages* restricts the result to the
    tracked package names.
    """

    provider: str
    owner: str
    repository: str
    analyzer: str
    ref: str = ""
    token: str = ""
    paths: tuple[str, ...] = ()
    packages: tuple[str, ...] = ()
    search_paths: tuple[str, ...] = ()
    base_url: str = ""

    @property
    def identity(self) -> tuple[str, str, str, str]:
        return (self.provider, self.owner, self.repository, self.ref)

    @property
    def repo_id(self) -> str:
        return f"{self.provider}:{self.owner}/{self.repository}@{self.ref}"


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RepositoryResult(_ReportModel):
    """Outcome of one repository job.

    A populated ``dependencies`` map and a non-null ``error`` may coexist.
    """

    provider: str
    owner: str
    repository: str
    ref: str
    analyzer_id: str
    dependencies: dict[str, str] = Field(default_factory=dict)
    error: str | None = None

    @classmethod
    def for_job(cls, job: RepositoryJob) -> RepositoryResult:
        return cls(
            provider=job.provider,
            owner=job.owner,
            repository=job.repository,
            ref=job.ref,
            analyzer_id=job.analyzer,
        )

    @property
    def identifier(self) -> str:
        return f"{self.owner}/{self.repository}"

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ReportSummary(_ReportModel):
    repository_count: int
    package_count: int
    success_count: int
    error_count: int


class PackageVersions(BaseModel):
    """Repositories grouped by the version they pin for one package."""

    package: str
    versions: dict[str, list[str]]  # version ("" = not found) -> ["owner/repo", ...]


class Report(_ReportModel):
    """Aggregated dependency report across repositories."""

    repositories: list[RepositoryResult]
    packages: list[str]
    summary: ReportSummary

    @classmethod
    def build(cls, repositories: list[RepositoryResult], packages: list[str]) -> Report:
        errors = sum(1 for r in repositories if r.error is not None)
        return cls(
            repositories=repositories,
            packages=packages,
            summary=ReportSummary(
                repository_count=len(repositories),
                package_count=len(packages),
                success_count=len(repositories) - errors,
                error_count=errors,
            ),
        )

    def package_versions(self) -> list[PackageVersions]:
        result: list[PackageVersions] = []
        for pkg in self.packages:
            versions: dict[str, list[str]] = {}
            for repo in self.repositories:
                version = repo.dependencies.get(pkg, "")
                versions.setdefault(version, []).append(repo.identifier)
            result.append(PackageVersions(package=pkg, versions=versions))
        return result

    def has_errors(self) -> bool:
        return any(r.error is not None for r in self.repositories)

    def errors(self) -> dict[str, str]:
        return {r.identifier: r.error for r in self.repositories if r.error is not None}

    def to_json(self, indent: int | None = None, include_errors: bool = False) -> str:
        """camelCase JSON; *include_errors* adds an ``errors`` map (``owner/repo`` -> message)."""
        if not include_errors:
            return self.model_dump_json(by_alias=True, indent=indent)
        data = self.model_dump(mode="json", by_alias=True)
        data["errors"] = self.errors()
        return json.dumps(data, indent=indent)

    @classmethod
    def from_json(cls, text: str) -> Report:
        return cls.model_validate_json(text)
