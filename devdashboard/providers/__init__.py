"""Repository providers — accessors over hosted repository contents."""

from devdashboard.providers.base import FileEntry, RepositoryAccessor

__all__ = ["FileEntry", "RepositoryAccessor"]
