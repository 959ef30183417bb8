"""Lock-file parsers — auto-registered on import."""

from devdashboard.engines.dependency_analyzer.parsers import (
    pipfile_lock,  # noqa: F401
    poetry_lock,  # noqa: F401
    uv_lock,  # noqa: F401
)
