"""Async GitHub REST client implementing the repository accessor."""

from __future__ import annotations

import base64
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from devdashboard.providers.base import FileEntry

log = structlog.get_logger("devdashboard.provider")

DEFAULT_BASE_URL = "https://api.github.com"

# git tree entry type -> FileEntry.type
_TREE_TYPES = {"blob": "file", "tree": "dir", "commit": "submodule"}


class GitHubClient:
    """Thin async wrapper around the GitHub REST API.

    Pass *base_url* for GitHub Enterprise (e.g. ``https://ghe.example.com/api/v3``).
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or DEFAULT_BASE_URL,
            headers=headers,
            timeout=30.0,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── accessor ───────────────────────────────────────────────────────────

    async def default_branch(self, owner: str, repo: str) -> str:
        data = await self._get_json(f"/repos/{owner}/{repo}")
        return data["default_branch"]

    async def list_files_recursive(self, owner: str, repo: str, ref: str) -> list[FileEntry]:
        """Return every entry of the git tree at *ref* (default branch if empty)."""
        ref = ref or await self.default_branch(owner, repo)
        data = await self._get_json(
            f"/repos/{owner}/{repo}/git/trees/{quote(ref, safe='')}",
            params={"recursive": "1"},
        )
        if data.get("truncated"):
            log.warning("github.tree_truncated", owner=owner, repo=repo, ref=ref)

        return [
            FileEntry(
                path=entry["path"],
                type=_TREE_TYPES.get(entry.get("type", ""), entry.get("type", "")),
                size=entry.get("size", 0),
                sha=entry.get("sha", ""),
            )
            for entry in data.get("tree", [])
        ]

    async def get_file_content(self, owner: str, repo: str, ref: str, path: str) -> str:
        params = {"ref": ref} if ref else None
        data = await self._get_json(
            f"/repos/{owner}/{repo}/contents/{quote(path)}", params=params
        )
        if isinstance(data, list) or data.get("type") != "file":
            raise ValueError(f"path is not a file: {path}")

        encoding = data.get("encoding", "base64")
        if encoding != "base64":
            raise ValueError(f"unsupported content encoding {encoding!r} for {path}")
        return base64.b64decode(data.get("content", "")).decode("utf-8")

    # ── internal ───────────────────────────────────────────────────────────

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()
