"""Toolchain version probing."""

from __future__ import annotations

from collections.abc import Mapping

from gobuildenv.command import command_for, run_combined
from gobuildenv.environ import BuildEnvironment
from gobuildenv.errors import MalformedVersionOutputError


def parse_version_output(output: str) -> str:
    """Extract the version token from ``go version`` output.

    The toolchain reports ``<program> version <version> <platform>``; the third
    whitespace-delimited field is returned verbatim.
    """
    fields = output.split()
    if len(fields) < 3:
        raise MalformedVersionOutputError(output)
    return fields[2]


def probe_version(
    environ: BuildEnvironment,
    *,
    host_environ: Mapping[str, str] | None = None,
) -> str:
    """Return the version ``runtime.Version`` would report for this environment's go."""
    output = run_combined(command_for(environ, "version", host_environ=host_environ))
    return parse_version_output(output)


__all__ = ["parse_version_output", "probe_version"]
