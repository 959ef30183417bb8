"""Tests for the GitHub and GitLab clients and ProviderFactory (httpx mock transport)."""

from __future__ import annotations

import base64

import httpx
import pytest

from devdashboard.core.exceptions import UnsupportedProviderError
from devdashboard.engines.report.models import RepositoryJob
from devdashboard.providers import FileEntry, RepositoryAccessor
from devdashboard.providers.factory import ProviderFactory
from devdashboard.providers.github_client import GitHubClient
from devdashboard.providers.gitlab_client import GitLabClient, project_id

LOCK = '[[package]]\nname = "six"\nversion = "1.16.0"\n'


def _github_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/repos/acme/app":
        return httpx.Response(200, json={"default_branch": "develop"})
    if path.startswith("/repos/acme/app/git/trees/"):
        assert request.url.params["recursive"] == "1"
        return httpx.Response(
            200,
            json={
                "sha": "abc",
                "truncated": False,
                "tree": [
                    {"path": "poetry.lock", "type": "blob", "size": 42, "sha": "s1"},
                    {"path": "services", "type": "tree", "sha": "s2"},
                    {"path": "vendor/lib", "type": "commit", "sha": "s3"},
                ],
            },
        )
    if path == "/repos/acme/app/contents/services/api/poetry.lock":
        return httpx.Response(
            200,
            json={
                "type": "file",
                "encoding": "base64",
                "content": base64.b64encode(LOCK.encode()).decode(),
            },
        )
    if path == "/repos/acme/app/contents/services":
        return httpx.Response(200, json=[{"type": "file", "path": "services/x"}])
    return httpx.Response(404, json={"message": "Not Found"})


class TestGitHubClient:
    @pytest.mark.anyio
    async def test_list_files(self):
        async with GitHubClient(transport=httpx.MockTransport(_github_handler)) as client:
            entries = await client.list_files_recursive("acme", "app", "main")

        assert entries[0] == FileEntry(path="poetry.lock", type="file", size=42, sha="s1")
        assert [e.type for e in entries] == ["file", "dir", "submodule"]
        assert entries[0].name == "poetry.lock"

    @pytest.mark.anyio
    async def test_empty_ref_uses_default_branch(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return _github_handler(request)

        async with GitHubClient(transport=httpx.MockTransport(handler)) as client:
            await client.list_files_recursive("acme", "app", "")

        assert seen == ["/repos/acme/app", "/repos/acme/app/git/trees/develop"]

    @pytest.mark.anyio
    async def test_get_file_content(self):
        refs: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            refs.append(request.url.params.get("ref", ""))
            return _github_handler(request)

        async with GitHubClient(transport=httpx.MockTransport(handler)) as client:
            content = await client.get_file_content("acme", "app", "v1.2", "services/api/poetry.lock")

        assert content == LOCK
        assert refs == ["v1.2"]

    @pytest.mark.anyio
    async def test_directory_is_not_a_file(self):
        async with GitHubClient(transport=httpx.MockTransport(_github_handler)) as client:
            with pytest.raises(ValueError, match="path is not a file"):
                await client.get_file_content("acme", "app", "", "services")

    @pytest.mark.anyio
    async def test_http_error(self):
        async with GitHubClient(transport=httpx.MockTransport(_github_handler)) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.list_files_recursive("acme", "missing", "main")

    @pytest.mark.anyio
    async def test_token_header(self):
        headers: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            headers.append(request.headers.get("Authorization"))
            return _github_handler(request)

        async with GitHubClient("t0k", transport=httpx.MockTransport(handler)) as client:
            await client.list_files_recursive("acme", "app", "main")
        async with GitHubClient(transport=httpx.MockTransport(handler)) as client:
            await client.list_files_recursive("acme", "app", "main")

        assert headers == ["token t0k", None]

    @pytest.mark.anyio
    async def test_enterprise_base_url(self):
        hosts: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            hosts.append(request.url.host)
            return httpx.Response(200, json={"tree": []})

        client = GitHubClient(
            base_url="https://ghe.example.com/api/v3", transport=httpx.MockTransport(handler)
        )
        async with client:
            assert await client.list_files_recursive("acme", "app", "main") == []
        assert hosts == ["ghe.example.com"]


def _gitlab_handler(request: httpx.Request) -> httpx.Response:
    raw = request.url.raw_path
    assert b"/projects/acme%2Fapp/" in raw
    if request.url.path.endswith("/repository/tree"):
        page = request.url.params["page"]
        if page == "1":
            return httpx.Response(
                200,
                json=[
                    {"id": "a1", "name": "poetry.lock", "type": "blob", "path": "poetry.lock"},
                    {"id": "a2", "name": "svc", "type": "tree", "path": "svc"},
                ],
                headers={"X-Next-Page": "2"},
            )
        return httpx.Response(
            200,
            json=[{"id": "a3", "name": "uv.lock", "type": "blob", "path": "svc/uv.lock"}],
            headers={"X-Next-Page": ""},
        )
    if request.url.path.endswith("/raw"):
        assert b"svc%2Fuv.lock" in raw
        return httpx.Response(200, text=LOCK)
    return httpx.Response(404)


class TestGitLabClient:
    def test_project_id(self):
        assert project_id("group/sub", "app") == "group%2Fsub%2Fapp"

    @pytest.mark.anyio
    async def test_list_files_paginates(self):
        async with GitLabClient(transport=httpx.MockTransport(_gitlab_handler)) as client:
            entries = await client.list_files_recursive("acme", "app", "main")

        assert [(e.path, e.type) for e in entries] == [
            ("poetry.lock", "file"),
            ("svc", "dir"),
            ("svc/uv.lock", "file"),
        ]

    @pytest.mark.anyio
    async def test_get_file_content(self):
        params: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            params.append(request.url.params["ref"])
            return _gitlab_handler(request)

        async with GitLabClient(transport=httpx.MockTransport(handler)) as client:
            assert await client.get_file_content("acme", "app", "", "svc/uv.lock") == LOCK

        assert params == ["HEAD"]

    @pytest.mark.anyio
    async def test_private_token_header(self):
        tokens: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            tokens.append(request.headers.get("PRIVATE-TOKEN"))
            return _gitlab_handler(request)

        async with GitLabClient("glpat", transport=httpx.MockTransport(handler)) as client:
            await client.get_file_content("acme", "app", "main", "svc/uv.lock")

        assert tokens == ["glpat"]


class TestProviderFactory:
    @pytest.mark.anyio
    async def test_clients_cached_per_credentials(self):
        async with ProviderFactory() as factory:
            first = factory.client_for("github", "t1")
            assert factory.client_for("GitHub", "t1") is first
            assert factory.client_for("github", "t2") is not first
            assert isinstance(factory.client_for("gitlab"), GitLabClient)
            assert isinstance(first, RepositoryAccessor)

    @pytest.mark.anyio
    async def test_accessor_for_job(self):
        transport = httpx.MockTransport(_github_handler)
        job = RepositoryJob(
            provider="github", owner="acme", repository="app", analyzer="poetry", token="t"
        )
        async with ProviderFactory(transport=transport) as factory:
            accessor = factory.accessor_for(job)
            entries = await accessor.list_files_recursive(job.owner, job.repository, "main")

        assert isinstance(accessor, GitHubClient)
        assert entries[0].path == "poetry.lock"

    @pytest.mark.anyio
    async def test_unsupported_provider(self):
        async with ProviderFactory() as factory:
            assert factory.supported() == ["github", "gitlab"]
            with pytest.raises(UnsupportedProviderError, match="unsupported provider: bitbucket"):
                factory.client_for("bitbucket")

    @pytest.mark.anyio
    async def test_close_closes_clients(self):
        factory = ProviderFactory()
        client = factory.client_for("github")
        await factory.close()
        assert client._client.is_closed
