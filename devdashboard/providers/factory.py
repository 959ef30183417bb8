"""Provider factory — build and share repository accessors per provider."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import structlog

from devdashboard.core.exceptions import UnsupportedProviderError
from devdashboard.engines.report.models import RepositoryJob
from devdashboard.providers.base import RepositoryAccessor
from devdashboard.providers.github_client import GitHubClient
from devdashboard.providers.gitlab_client import GitLabClient

log = structlog.get_logger("devdashboard.provider")

ClientFactory = Callable[..., RepositoryAccessor]

PROVIDERS: dict[str, ClientFactory] = {
    "github": GitHubClient,
    "gitlab": GitLabClient,
}


class ProviderFactory:
    """Create one client per ``(provider, token, base_url)`` and close them together.

    ``accessor_for`` is the resolver handed to the report orchestrator.
    """

    def __init__(
        self,
        providers: dict[str, ClientFactory] | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._providers = dict(providers if providers is not None else PROVIDERS)
        self._transport = transport
        self._clients: dict[tuple[str, str, str], RepositoryAccessor] = {}

    def supported(self) -> list[str]:
        return sorted(self._providers)

    def client_for(self, provider: str, token: str = "", base_url: str = "") -> RepositoryAccessor:
        name = provider.strip().lower()
        factory = self._providers.get(name)
        if factory is None:
            raise UnsupportedProviderError(provider, self.supported())

        key = (name, token, base_url)
        client = self._clients.get(key)
        if client is None:
            client = factory(token or None, base_url or None, transport=self._transport)
            self._clients[key] = client
            log.debug("provider.client_created", provider=name, base_url=base_url or None)
        return client

    def accessor_for(self, job: RepositoryJob) -> RepositoryAccessor:
        return self.client_for(job.provider, job.token, job.base_url)

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()

    async def __aenter__(self) -> ProviderFactory:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
