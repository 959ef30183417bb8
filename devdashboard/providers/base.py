"""Repository-content accessor interface shared by all provider clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class FileEntry:
    """One entry of a recursive repository listing."""

    path: str
    type: str  # "file" | "dir" | "submodule" | "symlink"
    size: int = 0
    sha: str = ""

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@runtime_checkable
class RepositoryAccessor(Protocol):
    """Read-only view of a hosted repository.

    Implementations must be safe to share between concurrent report jobs.
    An empty *ref* means the repository's default branch.
    """

    async def list_files_recursive(self, owner: str, repo: str, ref: str) -> list[FileEntry]: ...

    async def get_file_content(self, owner: str, repo: str, ref: str, path: str) -> str: ...
