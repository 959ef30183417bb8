"""Parser for Pipenv Pipfile.lock files."""

from __future__ import annotations

import json

from devdashboard.core.exceptions import LockFileParseError
from devdashboard.engines.dependency_analyzer.base import LockFileAnalyzer
from devdashboard.engines.dependency_analyzer.models import DependencyRecord
from devdashboard.engines.dependency_analyzer.registry import register_builtin

# Section name → dependency kind, in emission order.
_SECTIONS = (("default", "runtime"), ("develop", "dev"))


def _strip_pin(version: str) -> str:
    return version[2:] if version.startswith("==") else version


class PipfileLockAnalyzer(LockFileAnalyzer):
    name = "pipfile"
    lock_file = "Pipfile.lock"

    def parse(self, content: str) -> list[DependencyRecord]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise LockFileParseError(self.lock_file, str(exc)) from exc

        if not isinstance(data, dict):
            raise LockFileParseError(self.lock_file, "top level must be an object")

        deps: list[DependencyRecord] = []
        for section, kind in _SECTIONS:
            table = data.get(section) or {}
            if not isinstance(table, dict):
                raise LockFileParseError(self.lock_file, f"'{section}' must be an object")

            for name, info in table.items():
                if not name:
                    continue
                if not isinstance(info, dict):
                    raise LockFileParseError(
                        self.lock_file, f"entry {name!r} in '{section}' is not an object"
                    )
                deps.append(
                    DependencyRecord(
                        name=name,
                        version=_strip_pin(str(info.get("version", ""))),
                        kind=kind,
                        origin="pypi",
                    )
                )

        return deps


register_builtin(PipfileLockAnalyzer.name, PipfileLockAnalyzer)
