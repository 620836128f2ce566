from pathlib import Path

import pytest

from gobuildenv import environ as environ_module
from gobuildenv.environ import BuildEnvironment, default

HOST = {"PATH": "/usr/bin:/bin"}


def test_env_always_emits_cgo_and_module_mode_once() -> None:
    env = BuildEnvironment().env(HOST)

    assert env == ["CGO_ENABLED=0", "GO111MODULE="]
    assert sum(entry.startswith("CGO_ENABLED=") for entry in env) == 1
    assert sum(entry.startswith("GO111MODULE=") for entry in env) == 1


def test_env_orders_variables_and_prepends_toolchain_bin_to_path() -> None:
    environ = BuildEnvironment(
        target_os="linux",
        target_arch="arm64",
        workspace_root="/tmp/ws",
        toolchain_root="/usr/local/go",
        cgo_enabled=True,
        module_mode="off",
    )

    assert environ.env(HOST) == [
        "GOARCH=arm64",
        "GOOS=linux",
        "GOPATH=/tmp/ws",
        "CGO_ENABLED=1",
        "GO111MODULE=off",
        "GOROOT=/usr/local/go",
        "PATH=/usr/local/go/bin:/usr/bin:/bin",
    ]


def test_env_path_uses_empty_host_path_when_unset() -> None:
    env = BuildEnvironment(toolchain_root="/opt/go").env({})

    assert env[-1] == "PATH=/opt/go/bin:"


@pytest.mark.parametrize("root", ["/usr/local/go", "/opt/go1.11", "relative/go"])
def test_path_entry_starts_with_toolchain_bin(root: str) -> None:
    env = BuildEnvironment(toolchain_root=root).env(HOST)

    path_entries = [entry for entry in env if entry.startswith("PATH=")]
    assert len(path_entries) == 1
    assert path_entries[0].removeprefix("PATH=").startswith(f"{root}/bin:")


def test_env_is_idempotent() -> None:
    environ = BuildEnvironment(target_os="darwin", toolchain_root="/usr/local/go")

    assert environ.env(HOST) == environ.env(HOST)


def test_str_joins_env_with_spaces(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATH", "/bin")
    environ = BuildEnvironment(target_os="linux", toolchain_root="/go")

    assert str(environ) == "GOOS=linux CGO_ENABLED=0 GO111MODULE= GOROOT=/go PATH=/go/bin:/bin"


def test_go_binary_location() -> None:
    assert BuildEnvironment(toolchain_root="/usr/local/go").go_binary == Path(
        "/usr/local/go/bin/go"
    )
    assert BuildEnvironment().go_binary == Path("go")


def test_with_tags_returns_copy() -> None:
    environ = BuildEnvironment(target_os="linux")
    tagged = environ.with_tags("netgo", "osusergo")

    assert tagged.build_tags == ("netgo", "osusergo")
    assert environ.build_tags == ()
    assert tagged.target_os == "linux"


def test_default_reads_host_variables() -> None:
    environ = default(
        {
            "GOOS": "windows",
            "GOARCH": "386",
            "GOPATH": "/home/u/go",
            "GOROOT": "/usr/lib/go",
            "CGO_ENABLED": "1",
            "GO111MODULE": "on",
        }
    )

    assert environ == BuildEnvironment(
        target_os="windows",
        target_arch="386",
        workspace_root="/home/u/go",
        toolchain_root="/usr/lib/go",
        cgo_enabled=True,
        module_mode="on",
    )


def test_default_falls_back_to_host_platform(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(environ_module, "host_goos", lambda: "linux")
    monkeypatch.setattr(environ_module, "host_goarch", lambda: "amd64")

    environ = default({"GOROOT": "/usr/local/go"})

    assert environ.target_os == "linux"
    assert environ.target_arch == "amd64"
    assert environ.cgo_enabled is True
    assert environ.module_mode == ""


def test_default_disables_cgo_for_cross_builds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(environ_module, "host_goos", lambda: "linux")
    monkeypatch.setattr(environ_module, "host_goarch", lambda: "amd64")

    environ = default({"GOARCH": "arm64", "GOROOT": "/usr/local/go"})

    assert environ.cgo_enabled is False


def test_default_discovers_goroot_from_path(tmp_path: Path) -> None:
    bin_dir = tmp_path / "go" / "bin"
    bin_dir.mkdir(parents=True)
    go = bin_dir / "go"
    go.write_text("#!/bin/sh\n", encoding="utf-8")
    go.chmod(0o755)

    environ = default({"PATH": str(bin_dir)})

    assert environ.toolchain_root == str((tmp_path / "go").resolve())


def test_default_never_fails_without_toolchain(tmp_path: Path) -> None:
    environ = default({"PATH": str(tmp_path)})

    assert environ.toolchain_root == ""
    assert environ.go_binary == Path("go")


def test_default_workspace_root_uses_home_from_snapshot(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", "/real/home")

    environ = default({"HOME": "/snapshot/home", "GOROOT": "/go"})

    assert environ.workspace_root == "/snapshot/home/go"


def test_default_workspace_root_empty_without_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", "/real/home")

    assert default({"GOROOT": "/go"}).workspace_root == ""
