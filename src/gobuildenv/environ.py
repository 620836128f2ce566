"""Go build environment model and host-default discovery."""

from __future__ import annotations

import os
import platform
import shutil
import sys
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

_HOST_OS_NAMES = (
    ("linux", "linux"),
    ("darwin", "darwin"),
    ("win", "windows"),
    ("freebsd", "freebsd"),
    ("openbsd", "openbsd"),
    ("netbsd", "netbsd"),
)

_HOST_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


@dataclass(frozen=True, slots=True)
class BuildEnvironment:
    """Configuration for a single Go build operation.

    Empty strings mean "inherit the host default"; ``cgo_enabled`` and
    ``module_mode`` are always forwarded to the toolchain.
    """

    target_os: str = ""
    target_arch: str = ""
    workspace_root: str = ""
    toolchain_root: str = ""
    cgo_enabled: bool = False
    module_mode: str = ""
    build_tags: tuple[str, ...] = ()

    @property
    def go_binary(self) -> Path:
        if not self.toolchain_root:
            return Path("go")
        return Path(self.toolchain_root) / "bin" / "go"

    def with_tags(self, *tags: str) -> BuildEnvironment:
        return replace(self, build_tags=tuple(tags))

    def env(self, host_environ: Mapping[str, str] | None = None) -> list[str]:
        """Return all environment variables for invoking a go command."""
        if host_environ is None:
            host_environ = os.environ
        env: list[str] = []
        if self.target_arch:
            env.append(f"GOARCH={self.target_arch}")
        if self.target_os:
            env.append(f"GOOS={self.target_os}")
        if self.workspace_root:
            env.append(f"GOPATH={self.workspace_root}")
        env.append(f"CGO_ENABLED={int(self.cgo_enabled)}")
        env.append(f"GO111MODULE={self.module_mode}")

        if self.toolchain_root:
            env.append(f"GOROOT={self.toolchain_root}")
            # Sub-tools invoked by go must resolve the same toolchain, not
            # whatever "go" happens to come first on the host PATH.
            bin_dir = Path(self.toolchain_root) / "bin"
            env.append(f"PATH={bin_dir}{os.pathsep}{host_environ.get('PATH', '')}")
        return env

    def __str__(self) -> str:
        return " ".join(self.env())


def default(host_environ: Mapping[str, str] | None = None) -> BuildEnvironment:
    """Build environment from the host's GOOS, GOARCH, GOROOT, GOPATH and CGO_ENABLED.

    ``GO111MODULE`` is passed through verbatim. Discovery never fails; values
    that cannot be determined are left empty.
    """
    if host_environ is None:
        host_environ = dict(os.environ)

    target_os = host_environ.get("GOOS") or host_goos()
    target_arch = host_environ.get("GOARCH") or host_goarch()

    cgo = host_environ.get("CGO_ENABLED")
    if cgo:
        cgo_enabled = cgo == "1"
    else:
        # Cross builds default to cgo off, native builds to cgo on.
        cgo_enabled = bool(target_os) and (target_os, target_arch) == (host_goos(), host_goarch())

    return BuildEnvironment(
        target_os=target_os,
        target_arch=target_arch,
        workspace_root=host_environ.get("GOPATH") or _default_gopath(host_environ),
        toolchain_root=host_environ.get("GOROOT") or _discover_goroot(host_environ),
        cgo_enabled=cgo_enabled,
        module_mode=host_environ.get("GO111MODULE", ""),
    )


def host_goos() -> str:
    for prefix, goos in _HOST_OS_NAMES:
        if sys.platform.startswith(prefix):
            return goos
    return ""


def host_goarch() -> str:
    return _HOST_ARCH_NAMES.get(platform.machine().lower(), "")


def _default_gopath(host_environ: Mapping[str, str]) -> str:
    home = host_environ.get("HOME")
    if not home:
        return ""
    return str(Path(home) / "go")


def _discover_goroot(host_environ: Mapping[str, str]) -> str:
    search_path = host_environ.get("PATH")
    if not search_path:
        return ""
    found = shutil.which("go", path=search_path)
    if found is None:
        return ""
    binary = Path(found).resolve()
    if binary.parent.name != "bin":
        return ""
    return str(binary.parent.parent)


__all__ = ["BuildEnvironment", "default", "host_goarch", "host_goos"]
