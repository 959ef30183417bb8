"""Report engine — orchestrate repository jobs into an aggregated report."""

from devdashboard.engines.report.models import (
    PackageVersions,
    Report,
    RepositoryJob,
    RepositoryResult,
    ReportSummary,
)
from devdashboard.engines.report.orchestrator import ReportOrchestrator
from devdashboard.engines.report.progress import ProgressEvent, ProgressPhase, ProgressSink
from devdashboard.engines.report.service import ReportRun, ReportService

__all__ = [
    "PackageVersions",
    "ProgressEvent",
    "ProgressPhase",
    "ProgressSink",
    "Report",
    "ReportOrchestrator",
    "ReportRun",
    "ReportService",
    "ReportSummary",
    "RepositoryJob",
    "RepositoryResult",
]
