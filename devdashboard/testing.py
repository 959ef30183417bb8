"""Test doubles for devdashboard — use in unit and integration tests.

Usage::

    from devdashboard.testing import FakeRepositoryAccessor

    accessor = FakeRepositoryAccessor(files={"poetry.lock": "..."})
    accessor = FakeRepositoryAccessor(list_error=RuntimeError("boom"))
"""

from __future__ import annotations

import asyncio

from devdashboard.providers.base import FileEntry


class FakeRepositoryAccessor:
    """In-memory repository accessor recording every call.

    Parameters
    ----------
    files:
        Path → content. Every path is listed as a ``file`` entry.
    dirs:
        Extra paths listed as ``dir`` entries.
    list_error:
        Raised from every ``list_files_recursive`` call when set.
    content_errors:
        Path → exception raised when that file's content is requested.
    delay:
        Seconds to sleep inside each call (for concurrency/cancellation tests).
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        dirs: list[str] | None = None,
        list_error: Exception | None = None,
        content_errors: dict[str, Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.files = dict(files or {})
        self.dirs = list(dirs or [])
        self.list_error = list_error
        self.content_errors = dict(content_errors or {})
        self.delay = delay
        self.list_calls: list[tuple[str, str, str]] = []
        self.content_calls: list[tuple[str, str, str, str]] = []

    async def list_files_recursive(self, owner: str, repo: str, ref: str) -> list[FileEntry]:
        self.list_calls.append((owner, repo, ref))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.list_error is not None:
            raise self.list_error
        entries = [FileEntry(path=d, type="dir") for d in self.dirs]
        entries.extend(
            FileEntry(path=path, type="file", size=len(content))
            for path, content in self.files.items()
        )
        return entries

    async def get_file_content(self, owner: str, repo: str, ref: str, path: str) -> str:
        self.content_calls.append((owner, repo, ref, path))
        if self.delay:
            await asyncio.sleep(self.delay)
        if path in self.content_errors:
            raise self.content_errors[path]
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None
