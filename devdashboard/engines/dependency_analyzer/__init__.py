"""Dependency analyzer engine — read lock files into canonical dependency records."""

from devdashboard.engines.dependency_analyzer.base import LockFileAnalyzer
from devdashboard.engines.dependency_analyzer.models import (
    AnalysisConfig,
    CandidateFile,
    DependencyRecord,
)
from devdashboard.engines.dependency_analyzer.registry import (
    Analyzer,
    AnalyzerRegistry,
    default_registry,
)

__all__ = [
    "AnalysisConfig",
    "Analyzer",
    "AnalyzerRegistry",
    "CandidateFile",
    "DependencyRecord",
    "LockFileAnalyzer",
    "default_registry",
]
