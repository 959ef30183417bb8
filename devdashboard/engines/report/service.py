"""ReportService — run a report in the background and stream its progress."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import structlog

from devdashboard.core.exceptions import ConfigError
from devdashboard.engines.report.models import Report, RepositoryJob
from devdashboard.engines.report.orchestrator import ReportOrchestrator
from devdashboard.engines.report.progress import ProgressEvent, ProgressPhase, ProgressSink

log = structlog.get_logger("devdashboard.report")


class ReportRun:
    """Handle on a running report.

    Consume :meth:`events` for live progress (completion order) and await
    :meth:`result` for the final report.
    """

    def __init__(self, task: asyncio.Task[Report], queue: asyncio.Queue[ProgressEvent | None]):
        self._task = task
        self._queue = queue

    async def events(self) -> AsyncIterator[ProgressEvent]:
        """Yield progress events until the run ends."""
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event

    async def result(self) -> Report:
        return await self._task

    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        self._task.cancel()


class ReportService:
    """Start report runs on a shared :class:`ReportOrchestrator`."""

    def __init__(self, orchestrator: ReportOrchestrator) -> None:
        self._orchestrator = orchestrator

    def start(
        self,
        jobs: list[RepositoryJob],
        *,
        emit_aggregate_events: bool = False,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> ReportRun:
        """Launch a report for *jobs*; must be called from a running event loop."""
        if not jobs:
            raise ConfigError("no repositories provided")

        queue: asyncio.Queue[ProgressEvent | None] = asyncio.Queue()
        sink = ProgressSink()
        sink.subscribe(queue.put_nowait)

        async def _run() -> Report:
            if emit_aggregate_events:
                sink.emit("", ProgressPhase.AGGREGATE)
            report = await self._orchestrator.generate(
                jobs, cancel=cancel, timeout=timeout, progress=sink
            )
            if emit_aggregate_events:
                sink.emit("", ProgressPhase.COMPLETE)
            return report

        task = asyncio.create_task(_run(), name="report-run")
        # End-of-stream marker; also fires when the task is cancelled before it starts.
        task.add_done_callback(lambda _: queue.put_nowait(None))
        log.debug("report.run_started", repo_count=len(jobs))
        return ReportRun(task, queue)
