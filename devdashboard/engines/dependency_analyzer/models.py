"""Data models for the dependency analyzer engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from devdashboard.providers.base import RepositoryAccessor

DependencyKind = Literal["runtime", "dev", "optional"]


@dataclass(frozen=True)
class DependencyRecord:
    """A single resolved dependency read from a lock file."""

    name: str
    version: str  # raw, as written in the lock file
    kind: DependencyKind
    origin: str  # pypi | git | path | url, or a verbatim uv source type


@dataclass(frozen=True)
class CandidateFile:
    """A lock file selected for analysis, before its content is fetched."""

    path: str
    file_type: str
    analyzer: str


@dataclass
class AnalysisConfig:
    """Inputs shared by discovery and analysis of one repository.

    An empty *search_paths* list means the whole repository.
    """

    accessor: RepositoryAccessor | None
    search_paths: list[str] = field(default_factory=list)
