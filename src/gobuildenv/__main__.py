"""CLI for inspecting the Go build environment and running reproducible builds.

Usage:
    python -m gobuildenv env
    python -m gobuildenv version
    python -m gobuildenv build ./cmd/app -o out/app --tag netgo --extra-arg=-v
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace

from gobuildenv.build import BuildOptions, build_directory
from gobuildenv.environ import BuildEnvironment, default
from gobuildenv.errors import GoBuildEnvError
from gobuildenv.observability import StructuredLogger
from gobuildenv.version import probe_version


def environ_from_args(args: argparse.Namespace) -> BuildEnvironment:
    environ = default()
    overrides: dict[str, object] = {}
    if args.goos is not None:
        overrides["target_os"] = args.goos
    if args.goarch is not None:
        overrides["target_arch"] = args.goarch
    if args.goroot is not None:
        overrides["toolchain_root"] = args.goroot
    if args.gopath is not None:
        overrides["workspace_root"] = args.gopath
    if args.cgo is not None:
        overrides["cgo_enabled"] = args.cgo
    if args.tags:
        overrides["build_tags"] = tuple(args.tags)
    return replace(environ, **overrides)


def cmd_env(args: argparse.Namespace) -> None:
    print(environ_from_args(args))


def cmd_version(args: argparse.Namespace) -> None:
    print(probe_version(environ_from_args(args)))


def cmd_build(args: argparse.Namespace) -> None:
    options = BuildOptions(no_strip=args.no_strip, extra_args=tuple(args.extra))
    logger = StructuredLogger()
    try:
        result = build_directory(
            environ_from_args(args),
            args.source_dir,
            args.output,
            options,
            logger=logger,
        )
    finally:
        if args.log:
            logger.to_json_lines(args.log)
    if args.metadata:
        result.write_metadata(args.metadata)
    print(f"Built {result.output_path} with {result.toolchain_version}")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--goos", help="Target operating system")
    common.add_argument("--goarch", help="Target architecture")
    common.add_argument("--goroot", help="Toolchain installation root")
    common.add_argument("--gopath", help="Workspace root")
    common.add_argument(
        "--cgo",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable or disable cgo",
    )
    common.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=[],
        help="Build tag (repeatable)",
    )

    parser = argparse.ArgumentParser(prog="gobuildenv", description="Reproducible Go builds")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("env", parents=[common], help="Print the toolchain environment")
    sub.add_parser("version", parents=[common], help="Print the toolchain version")

    build_p = sub.add_parser("build", parents=[common], help="Build a package directory")
    build_p.add_argument("source_dir", help="Package directory to build")
    build_p.add_argument("-o", "--output", required=True, help="Output binary path")
    build_p.add_argument("--no-strip", action="store_true", help="Keep symbol tables")
    build_p.add_argument("--metadata", help="Write a JSON record of the invocation")
    build_p.add_argument("--log", help="Write structured build logs as JSON lines")
    build_p.add_argument(
        "--extra-arg",
        dest="extra",
        action="append",
        default=[],
        help="Extra go build argument (repeatable)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    handlers = {"env": cmd_env, "version": cmd_version, "build": cmd_build}
    try:
        handlers[args.command](args)
    except GoBuildEnvError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
