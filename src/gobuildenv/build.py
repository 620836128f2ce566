"""Reproducible, stripped ``go build`` invocations."""

from __future__ import annotations

import json
import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from gobuildenv.command import command_for, run_combined
from gobuildenv.environ import BuildEnvironment
from gobuildenv.errors import BuildExecutionError, ReproducibilityWarning, ToolchainExecutionError
from gobuildenv.observability import StructuredLogger
from gobuildenv.version import probe_version

# Toolchains whose version contains one of these support a bare -trimpath
# covering both compile and assembly stages.
UNIFIED_TRIMPATH_MARKERS = ("go1.13", "go1.14", "gotip")


@dataclass(frozen=True, slots=True)
class BuildOptions:
    # Build an unstripped binary.
    no_strip: bool = False
    # Extra arguments to `go build`, placed before the package argument.
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BuildResult:
    source_dir: Path
    output_path: Path
    toolchain_version: str
    argv: tuple[str, ...]
    output: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "source_dir": str(self.source_dir),
            "output_path": str(self.output_path),
            "toolchain_version": self.toolchain_version,
            "argv": list(self.argv),
        }

    def write_metadata(self, path: str | Path) -> Path:
        metadata_path = Path(path)
        metadata_path.parent.mkdir(parents=True, exist_ok=True)
        metadata_path.write_text(
            json.dumps(self.to_dict(), indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return metadata_path


def supports_unified_trimpath(version: str) -> bool:
    return any(marker in version for marker in UNIFIED_TRIMPATH_MARKERS)


def trimpath_flags(version: str, workspace_root: str) -> list[str]:
    """Flags that trim host paths out of the binary's debug information.

    E.g. trim /tmp/bb-*/ from /tmp/bb-12345567/src/github.com/...
    """
    if supports_unified_trimpath(version):
        return ["-trimpath"]
    return [
        "-gcflags",
        f"-trimpath={workspace_root}",
        "-asmflags",
        f"-trimpath={workspace_root}",
    ]


def build_args(
    environ: BuildEnvironment,
    output_path: str | Path,
    options: BuildOptions,
    version: str,
) -> list[str]:
    args = [
        "build",
        # Force rebuilding of packages.
        "-a",
        # Strip all symbols, and don't embed a Go build ID to be reproducible.
        "-ldflags",
        "-s -w -buildid=",
        "-o",
        str(output_path),
        "-installsuffix",
        "uroot",
        # Disable function inlining to get a smaller binary.
        "-gcflags=all=-l",
    ]
    if not options.no_strip:
        args.append("-ldflags=-s -w")

    args.extend(trimpath_flags(version, environ.workspace_root))

    if environ.build_tags:
        args.extend(["-tags", " ".join(environ.build_tags)])
    args.extend(options.extra_args)
    # The working directory is always the source directory.
    args.append(".")
    return args


def build_directory(
    environ: BuildEnvironment,
    source_dir: str | Path,
    output_path: str | Path,
    options: BuildOptions | None = None,
    *,
    host_environ: Mapping[str, str] | None = None,
    logger: StructuredLogger | None = None,
) -> BuildResult:
    """Compile the package in ``source_dir``, writing the binary to ``output_path``."""
    if options is None:
        options = BuildOptions()
    source = Path(source_dir)

    version = probe_version(environ, host_environ=host_environ)
    if logger is not None:
        logger.log(
            operation="probe",
            source_dir=str(source),
            toolchain=version,
            message=f"Using {environ.go_binary} ({version}).",
        )

    if not supports_unified_trimpath(version) and not environ.workspace_root:
        warnings.warn(
            f"Toolchain {version} needs an explicit trim prefix but no workspace root "
            "is configured; host paths will remain in the binary.",
            ReproducibilityWarning,
            stacklevel=2,
        )

    args = build_args(environ, output_path, options, version)
    command = command_for(environ, *args, host_environ=host_environ).with_cwd(source)
    if logger is not None:
        logger.log(
            operation="build",
            source_dir=str(source),
            toolchain=version,
            message=f"Building into {output_path}.",
            extra={"argv": command.argv, "env": " ".join(environ.env(host_environ))},
        )

    try:
        output = run_combined(command)
    except ToolchainExecutionError as exc:
        if logger is not None:
            logger.log(
                operation="build",
                source_dir=str(source),
                toolchain=version,
                message="go build failed.",
                level="error",
                extra={"returncode": exc.returncode},
            )
        raise BuildExecutionError(
            str(source),
            output=exc.output,
            cause=exc.cause,
            returncode=exc.returncode,
            context={**exc.context, "argv": " ".join(command.argv), "toolchain": version},
        ) from exc

    return BuildResult(
        source_dir=source,
        output_path=Path(output_path),
        toolchain_version=version,
        argv=tuple(command.argv),
        output=output,
    )


__all__ = [
    "UNIFIED_TRIMPATH_MARKERS",
    "BuildOptions",
    "BuildResult",
    "build_args",
    "build_directory",
    "supports_unified_trimpath",
    "trimpath_flags",
]
