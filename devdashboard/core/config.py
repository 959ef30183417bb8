"""Report configuration file — providers, repositories and their defaults."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from devdashboard.core.exceptions import ConfigError
from devdashboard.engines.report.models import RepositoryJob

_REQUIRED = ("owner", "repository", "analyzer")


class RepositoryConfig(BaseModel):
    """One repository entry; empty fields inherit from the provider default."""

    token: str = ""
    owner: str = ""
    repository: str = ""
    ref: str = ""
    paths: list[str] = []
    search_paths: list[str] = []
    packages: list[str] = []
    analyzer: str = ""
    base_url: str = ""

    @field_validator("token", "owner", "repository", "ref", "analyzer", "base_url", mode="before")
    @classmethod
    def _none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("paths", "search_paths", "packages", mode="before")
    @classmethod
    def _none_to_list(cls, v: object) -> object:
        return [] if v is None else v


class ProviderConfig(BaseModel):
    default: RepositoryConfig = RepositoryConfig()
    repositories: list[RepositoryConfig] = []

    @field_validator("default", mode="before")
    @classmethod
    def _none_to_default(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator("repositories", mode="before")
    @classmethod
    def _none_to_list(cls, v: object) -> object:
        return [] if v is None else v


class DashboardConfig(BaseModel):
    providers: dict[str, ProviderConfig] = {}

    def apply_defaults(self) -> None:
        """Fill empty repository fields from their provider default, then validate."""
        for provider, provider_config in self.providers.items():
            defaults = provider_config.default
            for index, repo in enumerate(provider_config.repositories):
                for name in RepositoryConfig.model_fields:
                    if name == "repository":
                        continue
                    if not getattr(repo, name):
                        setattr(repo, name, getattr(defaults, name))

                for name in _REQUIRED:
                    if not getattr(repo, name):
                        raise ConfigError(
                            f"provider {provider}: repository at index {index} "
                            f"missing required field '{name}'"
                        )

    def jobs(self) -> list[RepositoryJob]:
        """Flatten every provider's repositories into report jobs, in file order."""
        return [
            RepositoryJob(
                provider=provider,
                owner=repo.owner,
                repository=repo.repository,
                analyzer=repo.analyzer,
                ref=repo.ref,
                token=repo.token,
                paths=tuple(repo.paths),
                packages=tuple(repo.packages),
                search_paths=tuple(repo.search_paths),
                base_url=repo.base_url,
            )
            for provider, provider_config in self.providers.items()
            for repo in provider_config.repositories
        ]


def parse_config(text: str) -> DashboardConfig:
    """Parse and validate YAML configuration text, defaults applied."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse config file: {exc}") from exc

    try:
        config = DashboardConfig.model_validate(raw or {})
    except ValidationError as exc:
        raise ConfigError(f"failed to parse config file: {exc}") from exc

    config.apply_defaults()
    return config


def load_config(path: str | Path) -> DashboardConfig:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    return parse_config(text)
