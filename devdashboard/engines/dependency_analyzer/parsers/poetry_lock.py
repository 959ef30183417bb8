"""Parser for Poetry poetry.lock files."""

from __future__ import annotations

import sys

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from devdashboard.core.exceptions import LockFileParseError
from devdashboard.engines.dependency_analyzer.base import LockFileAnalyzer
from devdashboard.engines.dependency_analyzer.models import DependencyRecord
from devdashboard.engines.dependency_analyzer.registry import register_builtin


class PoetryLockAnalyzer(LockFileAnalyzer):
    name = "poetry"
    lock_file = "poetry.lock"

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

            # optional wins over category
            kind = "runtime"
            if pkg.get("category") == "dev":
                kind = "dev"
            if pkg.get("optional") is True:
                kind = "optional"

            deps.append(
                DependencyRecord(
                    name=str(name),
                    version=str(pkg.get("version", "")),
                    kind=kind,
                    origin="pypi",
                )
            )

        return deps


register_builtin(PoetryLockAnalyzer.name, PoetryLockAnalyzer)
