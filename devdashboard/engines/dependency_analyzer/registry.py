"""Analyzer registry — map analyzer ids to analyzer constructors."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from devdashboard.core.exceptions import UnknownAnalyzerError
from devdashboard.engines.dependency_analyzer.models import (
    AnalysisConfig,
    CandidateFile,
    DependencyRecord,
)


@runtime_checkable
class Analyzer(Protocol):
    """Interface that every lock-file analyzer must satisfy."""

    name: str

    async def discover_candidates(
        self, owner: str, repo: str, ref: str, config: AnalysisConfig
    ) -> list[CandidateFile]: ...

    async def analyze(
        self,
        owner: str,
        repo: str,
        ref: str,
        candidates: list[CandidateFile],
        config: AnalysisConfig,
    ) -> dict[str, list[DependencyRecord]]: ...


AnalyzerFactory = Callable[[], Analyzer]

# Filled by the parser modules on import; copied into every AnalyzerRegistry.
BUILTIN_ANALYZERS: dict[str, AnalyzerFactory] = {}


def register_builtin(analyzer_id: str, factory: AnalyzerFactory) -> None:
    """Register a built-in analyzer constructor by id."""
    BUILTIN_ANALYZERS[_normalize(analyzer_id)] = factory


def _normalize(analyzer_id: str) -> str:
    return analyzer_id.strip().lower()


class AnalyzerRegistry:
    """Closed id → constructor mapping, extended only through :meth:`register`."""

    def __init__(self, factories: dict[str, AnalyzerFactory] | None = None) -> None:
        self._factories: dict[str, AnalyzerFactory] = {}
        for analyzer_id, factory in (factories or {}).items():
            self.register(analyzer_id, factory)

    def register(self, analyzer_id: str, factory: AnalyzerFactory) -> None:
        self._factories[_normalize(analyzer_id)] = factory

    def create(self, analyzer_id: str) -> Analyzer:
        """Build a fresh analyzer; ids are case-insensitive and whitespace-trimmed."""
        factory = self._factories.get(_normalize(analyzer_id))
        if factory is None:
            raise UnknownAnalyzerError(analyzer_id, self.names())
        return factory()

    def names(self) -> list[str]:
        return list(self._factories)

    def __contains__(self, analyzer_id: object) -> bool:
        return isinstance(analyzer_id, str) and _normalize(analyzer_id) in self._factories


def default_registry() -> AnalyzerRegistry:
    """Return a new registry holding the built-in poetry, pipfile and uvlock analyzers."""
    # Ensure parsers are registered before the table is copied.
    import devdashboard.engines.dependency_analyzer.parsers  # noqa: F401

    return AnalyzerRegistry(BUILTIN_ANALYZERS)
