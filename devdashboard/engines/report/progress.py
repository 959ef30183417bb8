"""Progress events emitted while a report runs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

import structlog

log = structlog.get_logger("devdashboard.progress")


class ProgressPhase(str, enum.Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"
    AGGREGATE = "aggregate"  # whole-run events, repo_id is empty


@dataclass(frozen=True)
class ProgressEvent:
    repo_id: str  # provider:owner/repo@ref
    phase: ProgressPhase
    error: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ProgressSink:
    """Append-only event log with subscriber callbacks.

    Events arrive in completion order; only the final report is ordered.
    """

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []
        self.callbacks: list[Callable[[ProgressEvent], None]] = []

    def subscribe(self, callback: Callable[[ProgressEvent], None]) -> None:
        self.callbacks.append(callback)

    def emit(self, repo_id: str, phase: ProgressPhase, error: str | None = None) -> None:
        event = ProgressEvent(repo_id=repo_id, phase=phase, error=error)
        self.events.append(event)
        self._notify(event)

    def for_repo(self, repo_id: str) -> list[ProgressEvent]:
        return [e for e in self.events if e.repo_id == repo_id]

    def _notify(self, event: ProgressEvent) -> None:
        for cb in self.callbacks:
            try:
                cb(event)
            except Exception:
                log.debug(
                    "progress.callback_error",
                    repo_id=event.repo_id,
                    phase=event.phase.value,
                    exc_info=True,
                )
