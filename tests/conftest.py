"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass(slots=True)
class FakeGo:
    """Stands in for ``subprocess.run`` and records every go invocation."""

    version_output: str = "go version go1.14.1 linux/amd64\n"
    version_returncode: int = 0
    build_output: str = ""
    build_returncode: int = 0
    calls: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append({"argv": list(argv), **kwargs})
        if argv[1:] == ["version"]:
            return subprocess.CompletedProcess(argv, self.version_returncode, self.version_output)
        return subprocess.CompletedProcess(argv, self.build_returncode, self.build_output)

    @property
    def build_call(self) -> dict[str, Any]:
        builds = [call for call in self.calls if call["argv"][1:2] == ["build"]]
        assert len(builds) == 1
        return builds[0]


@pytest.fixture
def fake_go(monkeypatch: pytest.MonkeyPatch) -> FakeGo:
    """Replace subprocess execution with a scripted go toolchain."""
    fake = FakeGo()
    monkeypatch.setattr("gobuildenv.command.subprocess.run", fake)
    return fake
