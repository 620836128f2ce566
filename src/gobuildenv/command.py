"""Subprocess descriptors for go toolchain invocations."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from gobuildenv.environ import BuildEnvironment
from gobuildenv.errors import ToolchainExecutionError


@dataclass(frozen=True, slots=True)
class GoCommand:
    executable: Path
    args: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Path | None = None

    @property
    def argv(self) -> list[str]:
        return [str(self.executable), *self.args]

    def with_cwd(self, cwd: str | Path) -> GoCommand:
        return replace(self, cwd=Path(cwd))


def merge_environ(base: Mapping[str, str], overlay: Iterable[str]) -> dict[str, str]:
    """Overlay ``KEY=VALUE`` entries onto ``base``; later entries win."""
    merged = dict(base)
    for entry in overlay:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            continue
        merged[key] = value
    return merged


def command_for(
    environ: BuildEnvironment,
    *args: str,
    host_environ: Mapping[str, str] | None = None,
) -> GoCommand:
    """Describe ``go <args...>`` run inside ``environ``. Nothing is executed."""
    if host_environ is None:
        host_environ = dict(os.environ)
    return GoCommand(
        executable=environ.go_binary,
        args=tuple(args),
        env=merge_environ(host_environ, environ.env(host_environ)),
    )


def run_combined(command: GoCommand) -> str:
    """Run ``command`` to completion and return its combined stdout/stderr."""
    argv = command.argv
    context = {
        "argv": " ".join(argv),
        "cwd": str(command.cwd) if command.cwd is not None else "",
    }
    try:
        completed = subprocess.run(
            argv,
            cwd=command.cwd,
            env=dict(command.env),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise ToolchainExecutionError(
            "Go toolchain could not be started.",
            cause=str(exc),
            hint="Check that the configured toolchain root contains bin/go.",
            context=context,
        ) from exc

    output = completed.stdout or ""
    if completed.returncode != 0:
        raise ToolchainExecutionError(
            "Go toolchain command failed.",
            output=output,
            returncode=completed.returncode,
            cause=f"exit status {completed.returncode}",
            context=context,
        )
    return output


__all__ = ["GoCommand", "command_for", "merge_environ", "run_combined"]
