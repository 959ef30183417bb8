"""Async GitLab REST client implementing the repository accessor."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from devdashboard.providers.base import FileEntry

DEFAULT_BASE_URL = "https://gitlab.com/api/v4"

_TREE_TYPES = {"blob": "file", "tree": "dir", "commit": "submodule"}


def project_id(owner: str, repo: str) -> str:
    """URL-encoded ``owner/repo`` as GitLab expects it in place of a numeric id."""
    return quote(f"{owner}/{repo}", safe="")


class GitLabClient:
    """Thin async wrapper around the GitLab v4 REST API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {}
        if token:
            headers["PRIVATE-TOKEN"] = token
        self._client = httpx.AsyncClient(
            base_url=base_url or DEFAULT_BASE_URL,
            headers=headers,
            timeout=30.0,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitLabClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def default_branch(self, owner: str, repo: str) -> str:
        resp = await self._get(f"/projects/{project_id(owner, repo)}")
        return resp.json()["default_branch"]

    async def list_files_recursive(self, owner: str, repo: str, ref: str) -> list[FileEntry]:
        """Walk the paginated repository tree (``X-Next-Page``) at *ref*."""
        ref = ref or await self.default_branch(owner, repo)
        params: dict[str, Any] = {"recursive": "true", "per_page": 100, "ref": ref}
        entries: list[FileEntry] = []

        page: str | None = "1"
        while page:
            params["page"] = page
            resp = await self._get(
                f"/projects/{project_id(owner, repo)}/repository/tree", params=params
            )
            for node in resp.json():
                entries.append(
                    FileEntry(
                        path=node["path"],
                        type=_TREE_TYPES.get(node.get("type", ""), node.get("type", "")),
                        sha=node.get("id", ""),
                    )
                )
            page = resp.headers.get("X-Next-Page") or None

        return entries

    async def get_file_content(self, owner: str, repo: str, ref: str, path: str) -> str:
        params = {"ref": ref or "HEAD"}
        resp = await self._get(
            f"/projects/{project_id(owner, repo)}/repository/files/{quote(path, safe='')}/raw",
            params=params,
        )
        return resp.text

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return resp
