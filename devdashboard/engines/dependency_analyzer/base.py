"""Shared discovery and per-file analysis for lock-file analyzers."""

from __future__ import annotations

import structlog

from devdashboard.core.exceptions import DiscoveryError, MissingAccessorError
from devdashboard.engines.dependency_analyzer.models import (
    AnalysisConfig,
    CandidateFile,
    DependencyRecord,
)

log = structlog.get_logger("devdashboard.analyzer")


class LockFileAnalyzer:
    """Base class for analyzers that read a single lock-file format.

    Subclasses set ``name`` and ``lock_file`` and implement :meth:`parse`.
    """

    name: str = ""
    lock_file: str = ""

    def parse(self, content: str) -> list[DependencyRecord]:
        raise NotImplementedError

    async def discover_candidates(
        self,
        owner: str,
        repo: str,
        ref: str,
        config: AnalysisConfig,
    ) -> list[CandidateFile]:
        """List the repository once per search scope and keep matching lock files.

        A non-empty scope is a plain string prefix of the path, so ``"backend"``
        also matches ``"backendx/poetry.lock"``.
        """
        if config.accessor is None:
            raise MissingAccessorError()

        scopes = config.search_paths or [""]
        candidates: list[CandidateFile] = []
        seen: set[str] = set()

        for scope in scopes:
            try:
                entries = await config.accessor.list_files_recursive(owner, repo, ref)
            except Exception as exc:
                raise DiscoveryError(f"failed to list files: {exc}") from exc

            for entry in entries:
                if entry.type != "file":
                    continue
                if not entry.path.endswith(self.lock_file):
                    continue
                if scope and not entry.path.startswith(scope):
                    continue
                if entry.path in seen:
                    continue
                seen.add(entry.path)
                candidates.append(
                    CandidateFile(path=entry.path, file_type=self.lock_file, analyzer=self.name)
                )

        log.debug(
            "analyzer.candidates",
            analyzer=self.name,
            owner=owner,
            repo=repo,
            ref=ref,
            scopes=scopes,
            count=len(candidates),
        )
        return candidates

    async def analyze(
        self,
        owner: str,
        repo: str,
        ref: str,
        candidates: list[CandidateFile],
        config: AnalysisConfig,
    ) -> dict[str, list[DependencyRecord]]:
        """Fetch and parse every candidate, skipping files that fail.

        The result keeps candidate order; a missing key means that file
        could not be fetched or parsed.
        """
        if config.accessor is None:
            raise MissingAccessorError()

        results: dict[str, list[DependencyRecord]] = {}
        for candidate in candidates:
            try:
                content = await config.accessor.get_file_content(owner, repo, ref, candidate.path)
                records = self.parse(content)
            except Exception as exc:
                log.warning(
                    "analyzer.file_failed",
                    analyzer=self.name,
                    owner=owner,
                    repo=repo,
                    ref=ref,
                    path=candidate.path,
                    error=str(exc),
                )
                continue
            results[candidate.path] = records

        return results
