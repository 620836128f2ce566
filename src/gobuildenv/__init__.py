"""Public package entrypoint for reproducible Go toolchain invocations."""

from .build import BuildOptions, BuildResult, build_args, build_directory, trimpath_flags
from .command import GoCommand, command_for, merge_environ
from .environ import BuildEnvironment, default
from .errors import (
    BuildExecutionError,
    GoBuildEnvError,
    MalformedVersionOutputError,
    ReproducibilityWarning,
    ToolchainExecutionError,
)
from .observability import StructuredLogger
from .version import parse_version_output, probe_version

__all__ = [
    "BuildEnvironment",
    "BuildExecutionError",
    "BuildOptions",
    "BuildResult",
    "GoBuildEnvError",
    "GoCommand",
    "MalformedVersionOutputError",
    "ReproducibilityWarning",
    "StructuredLogger",
    "ToolchainExecutionError",
    "build_args",
    "build_directory",
    "command_for",
    "default",
    "merge_environ",
    "parse_version_output",
    "probe_version",
    "trimpath_flags",
]
