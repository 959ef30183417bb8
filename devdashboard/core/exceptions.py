"""Custom exceptions for devdashboard."""


class DevDashboardError(Exception):
    """Base exception for all devdashboard errors."""


class ConfigError(DevDashboardError):
    """Raised when a run or a single repository job is misconfigured."""


class MissingAccessorError(ConfigError):
    """Raised when an analyzer is invoked without a repository accessor."""

    def __init__(self) -> None:
        super().__init__("repository accessor is required")


class UnknownAnalyzerError(ConfigError):
    """Raised when an analyzer id has no registered constructor."""

    def __init__(self, analyzer_id: str, supported: list[str]):
        self.analyzer_id = analyzer_id
        self.supported = supported
        super().__init__(
            f"unsupported analyzer type: {analyzer_id} (supported: {', '.join(supported)})"
        )


class UnsupportedProviderError(ConfigError):
    """Raised when a provider id has no registered client."""

    def __init__(self, provider: str, supported: list[str]):
        self.provider = provider
        self.supported = supported
        super().__init__(
            f"unsupported provider: {provider} (supported: {', '.join(supported)})"
        )


class DiscoveryError(DevDashboardError):
    """Raised when listing repository files fails."""


class NoCandidatesError(DiscoveryError):
    """Raised when auto-search finds no lock file in a repository."""

    def __init__(self) -> None:
        super().__init__("no dependency files found")


class LockFileParseError(DevDashboardError):
    """Raised when a lock file cannot be decoded."""

    def __init__(self, file_type: str, reason: str):
        self.file_type = file_type
        self.reason = reason
        super().__init__(f"failed to parse {file_type}: {reason}")


class JobCancelledError(DevDashboardError):
    """Raised when a repository job is stopped by cancellation or deadline."""
