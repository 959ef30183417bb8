"""ReportOrchestrator — fan repository jobs out to a bounded worker pool."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable

import structlog

from devdashboard.core.exceptions import (
    ConfigError,
    DiscoveryError,
    JobCancelledError,
    MissingAccessorError,
    NoCandidatesError,
)
from devdashboard.engines.dependency_analyzer.models import (
    AnalysisConfig,
    CandidateFile,
    DependencyRecord,
)
from devdashboard.engines.dependency_analyzer.registry import Analyzer, AnalyzerRegistry
from devdashboard.engines.report.models import Report, RepositoryJob, RepositoryResult
from devdashboard.engines.report.progress import ProgressPhase, ProgressSink
from devdashboard.providers.base import RepositoryAccessor

log = structlog.get_logger("devdashboard.report")

AccessorResolver = Callable[[RepositoryJob], RepositoryAccessor | None]


def default_max_workers() -> int:
    """Pool size from ``DEVDASHBOARD_MAX_WORKERS``, else scaled to the CPU count."""
    configured = os.environ.get("DEVDASHBOARD_MAX_WORKERS")
    if configured:
        try:
            return max(1, int(configured))
        except ValueError:
            raise ConfigError(
                f"DEVDASHBOARD_MAX_WORKERS must be an integer, got {configured!r}"
            ) from None
    return min(32, (os.cpu_count() or 1) + 4)


async def resolve_candidates(
    analyzer: Analyzer,
    job: RepositoryJob,
    config: AnalysisConfig,
) -> list[CandidateFile]:
    """Pick the lock files to analyze for *job*.

    Explicit paths are used verbatim, in order, without listing the
    repository. Otherwise the analyzer searches the configured scopes.
    """
    if job.paths:
        return [
            CandidateFile(path=path, file_type=analyzer.name, analyzer=analyzer.name)
            for path in job.paths
        ]
    return await analyzer.discover_candidates(job.owner, job.repository, job.ref, config)


def merge_dependencies(
    results: dict[str, list[DependencyRecord]],
    packages: tuple[str, ...] = (),
) -> dict[str, str]:
    """Flatten per-file records into ``name -> version``.

    Files are visited in *results* order; the first file declaring a name
    wins. A non-empty *packages* keeps only those names.
    """
    tracked = set(packages)
    merged: dict[str, str] = {}
    for path, deps in results.items():
        for dep in deps:
            if tracked and dep.name not in tracked:
                continue
            if dep.name in merged:
                if merged[dep.name] != dep.version:
                    log.debug(
                        "report.duplicate_package",
                        package=dep.name,
                        kept=merged[dep.name],
                        discarded=dep.version,
                        path=path,
                    )
                continue
            merged[dep.name] = dep.version
    return merged


class ReportOrchestrator:
    """Run every repository job and merge the outcomes into one :class:`Report`.

    Parameters
    ----------
    registry:
        Analyzer ids available to jobs.
    accessors:
        Returns the repository accessor for a job (``None`` if there is none).
    max_workers:
        Number of concurrent jobs; defaults to :func:`default_max_workers`.
    progress:
        Default sink for per-job progress events; ``generate`` accepts a
        per-run override.
    """

    def __init__(
        self,
        registry: AnalyzerRegistry,
        accessors: AccessorResolver,
        *,
        max_workers: int | None = None,
        progress: ProgressSink | None = None,
    ) -> None:
        self._registry = registry
        self._accessors = accessors
        self._max_workers = max_workers if max_workers is not None else default_max_workers()
        if self._max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.progress = progress or ProgressSink()

    async def generate(
        self,
        jobs: list[RepositoryJob],
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
        progress: ProgressSink | None = None,
    ) -> Report:
        """Analyze all *jobs* and return a report in input order.

        Job failures (including cancellation via *cancel* or the *timeout*
        deadline) are recorded on that job's result; this never raises for them.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None

        sink = progress or self.progress
        log.info("report.started", repo_count=len(jobs), workers=self._max_workers)

        results: list[RepositoryResult | None] = [None] * len(jobs)
        queue: asyncio.Queue[tuple[int, RepositoryJob]] = asyncio.Queue()
        for index, job in enumerate(jobs):
            queue.put_nowait((index, job))
            sink.emit(job.repo_id, ProgressPhase.QUEUED)

        async def worker() -> None:
            while True:
                try:
                    index, job = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                results[index] = await self._run_job(job, sink, cancel, deadline)

        workers = [
            asyncio.create_task(worker(), name=f"report-worker-{n}")
            for n in range(min(self._max_workers, len(jobs)))
        ]
        await asyncio.gather(*workers)

        repositories = [r for r in results if r is not None]
        report = Report.build(repositories, _collect_packages(jobs, repositories))

        log.info(
            "report.complete",
            repo_count=report.summary.repository_count,
            errors=report.summary.error_count,
            packages=report.summary.package_count,
        )
        return report

    # ── per job ──────────────────────────────────────────────────────────

    async def _run_job(
        self,
        job: RepositoryJob,
        sink: ProgressSink,
        cancel: asyncio.Event | None,
        deadline: float | None,
    ) -> RepositoryResult:
        result = RepositoryResult.for_job(job)

        stop_reason = _stop_reason(cancel, deadline)
        if stop_reason is None:
            sink.emit(job.repo_id, ProgressPhase.RUNNING)
            try:
                result.dependencies = await self._await_job(job, cancel, deadline)
            except JobCancelledError as exc:
                result.error = str(exc)
            except Exception as exc:
                log.warning(
                    "report.job_failed",
                    repo_id=job.repo_id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                result.error = str(exc)
        else:
            result.error = stop_reason

        if result.error is None:
            sink.emit(job.repo_id, ProgressPhase.COMPLETE)
        else:
            sink.emit(job.repo_id, ProgressPhase.ERROR, result.error)
        return result

    async def _await_job(
        self,
        job: RepositoryJob,
        cancel: asyncio.Event | None,
        deadline: float | None,
    ) -> dict[str, str]:
        """Run :meth:`_analyze_repository`, stopping it on cancel or deadline."""
        if cancel is None and deadline is None:
            return await self._analyze_repository(job)

        task = asyncio.create_task(self._analyze_repository(job))
        waiters: set[asyncio.Future] = {task}
        cancel_waiter: asyncio.Task | None = None
        if cancel is not None:
            cancel_waiter = asyncio.create_task(cancel.wait())
            waiters.add(cancel_waiter)

        remaining = None
        if deadline is not None:
            remaining = max(0.0, deadline - asyncio.get_running_loop().time())

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()
                await asyncio.wait({cancel_waiter})

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.wait({task})
        reason = _stop_reason(cancel, deadline) or "job cancelled"
        log.info("report.job_cancelled", repo_id=job.repo_id, reason=reason)
        raise JobCancelledError(reason)

    async def _analyze_repository(self, job: RepositoryJob) -> dict[str, str]:
        log.debug(
            "report.analyzing",
            provider=job.provider,
            owner=job.owner,
            repo=job.repository,
            analyzer=job.analyzer,
        )

        analyzer = self._registry.create(job.analyzer)
        accessor = self._accessors(job)
        if accessor is None:
            raise MissingAccessorError()

        config = AnalysisConfig(accessor=accessor, search_paths=list(job.search_paths))

        try:
            candidates = await resolve_candidates(analyzer, job, config)
        except DiscoveryError as exc:
            raise DiscoveryError(f"failed to find dependency files: {exc}") from exc

        if not candidates:
            raise NoCandidatesError()

        files = await analyzer.analyze(job.owner, job.repository, job.ref, candidates, config)
        if len(files) < len(candidates):
            log.warning(
                "report.partial_analysis",
                repo_id=job.repo_id,
                candidates=len(candidates),
                analyzed=len(files),
            )

        merged = merge_dependencies(files, job.packages)
        log.debug("report.repository_done", repo_id=job.repo_id, found=len(merged))
        return merged


def _stop_reason(cancel: asyncio.Event | None, deadline: float | None) -> str | None:
    if cancel is not None and cancel.is_set():
        return "job cancelled"
    if deadline is not None and asyncio.get_running_loop().time() >= deadline:
        return "deadline exceeded"
    return None


def _collect_packages(
    jobs: list[RepositoryJob], repositories: list[RepositoryResult]
) -> list[str]:
    names: set[str] = set()
    for job in jobs:
        names.update(job.packages)
    for repo in repositories:
        names.update(repo.dependencies)
    return sorted(names)
