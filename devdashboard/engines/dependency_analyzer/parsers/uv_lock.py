"""Parser for uv uv.lock files."""

from __future__ import annotations

import sys
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from devdashboard.core.exceptions import LockFileParseError
from devdashboard.engines.dependency_analyzer.base import LockFileAnalyzer
from devdashboard.engines.dependency_analyzer.models import DependencyRecord
from devdashboard.engines.dependency_analyzer.registry import register_builtin

_DEV_MARKERS = ("extra == 'dev'", "extra == 'test'")

_ORIGIN_BY_SOURCE_TYPE = {
    "registry": "pypi",
    "git": "git",
    "path": "path",
    "directory": "path",
    "url": "url",
}

# Keys uv writes in a source table; the first one present names the source type.
_SOURCE_KINDS = ("registry", "git", "path", "directory", "url", "editable", "virtual")


def _source_type(source: dict[str, Any]) -> str:
    # Without a "type" key the table key names the source, so {editable = "."}
    # reports origin "editable" rather than falling back to "pypi".
    explicit = source.get("type")
    if isinstance(explicit, str) and explicit:
        return explicit
    for kind in _SOURCE_KINDS:
        if kind in source:
            return kind
    return ""


def _origin(source: Any) -> str:
    if not isinstance(source, dict):
        return "pypi"
    source_type = _source_type(source)
    if not source_type:
        return "pypi"
    return _ORIGIN_BY_SOURCE_TYPE.get(source_type, source_type)


def _markers(pkg: dict[str, Any]) -> list[str]:
    markers: list[str] = []
    marker = pkg.get("marker")
    if isinstance(marker, str):
        markers.append(marker)
    resolution = pkg.get("resolution-markers")
    if isinstance(resolution, str):
        markers.append(resolution)
    elif isinstance(resolution, list):
        markers.extend(m for m in resolution if isinstance(m, str))
    return markers


def _is_dev(pkg: dict[str, Any]) -> bool:
    dev_deps = pkg.get("dev-dependencies")
    if isinstance(dev_deps, dict) and dev_deps.get("dev"):
        return True
    return any(dev in marker for marker in _markers(pkg) for dev in _DEV_MARKERS)


class UvLockAnalyzer(LockFileAnalyzer):
    name = "uvlock"
    lock_file = "uv.lock"

    def parse(self, content: str) -> list[DependencyRecord]:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise LockFileParseError(self.lock_file, str(exc)) from exc

        packages = data.get("package", [])
        if not isinstance(packages, list):
            raise LockFileParseError(self.lock_file, "'package' must be an array of tables")

        deps: list[DependencyRecord] = []
        for pkg in packages:
            if not isinstance(pkg, dict):
                raise LockFileParseError(self.lock_file, "package entry is not a table")
            name = pkg.get("name")
            if not name:
                continue

            deps.append(
                DependencyRecord(
                    name=str(name),
                    version=str(pkg.get("version", "")),
                    kind="dev" if _is_dev(pkg) else "runtime",
                    origin=_origin(pkg.get("source")),
                )
            )

        return deps


register_builtin(UvLockAnalyzer.name, UvLockAnalyzer)
