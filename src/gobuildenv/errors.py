"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across the toolchain wrappers."""

    TOOLCHAIN_EXECUTION = "E_TOOLCHAIN_EXECUTION"
    MALFORMED_VERSION = "E_MALFORMED_VERSION"
    BUILD_EXECUTION = "E_BUILD_EXECUTION"


class GoBuildEnvError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ToolchainExecutionError(GoBuildEnvError):
    """A go subprocess could not be started or exited non-zero."""

    output: str
    returncode: int | None
    cause: str

    def __init__(
        self,
        message: str,
        *,
        output: str = "",
        returncode: int | None = None,
        cause: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
        code: ErrorCode = ErrorCode.TOOLCHAIN_EXECUTION,
    ) -> None:
        merged = {
            "cause": cause,
            "returncode": "" if returncode is None else str(returncode),
            **(context or {}),
            "output": output.strip(),
        }
        super().__init__(message, code=code, hint=hint, context=merged)
        self.output = output
        self.returncode = returncode
        self.cause = cause


class MalformedVersionOutputError(GoBuildEnvError):
    def __init__(self, output: str) -> None:
        super().__init__(
            f"unknown go version, tool returned weird output for 'go version': {output!r}",
            code=ErrorCode.MALFORMED_VERSION,
            hint="Expected '<program> version <version> <platform>'.",
            context={"output": output.strip()},
        )
        self.output = output


class BuildExecutionError(ToolchainExecutionError):
    """``go build`` failed for a source directory."""

    source_dir: str

    def __init__(
        self,
        source_dir: str,
        *,
        output: str,
        cause: str,
        returncode: int | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            f"error building go package in {source_dir!r}: {output.strip()}, {cause}",
            output=output,
            returncode=returncode,
            cause=cause,
            hint="Inspect the captured toolchain output above.",
            context={"source_dir": source_dir, **(context or {})},
            code=ErrorCode.BUILD_EXECUTION,
        )
        self.source_dir = source_dir


class ReproducibilityWarning(UserWarning):
    """Warning raised when a build cannot be guaranteed byte-for-byte reproducible."""


__all__ = [
    "BuildExecutionError",
    "ErrorCode",
    "GoBuildEnvError",
    "MalformedVersionOutputError",
    "ReproducibilityWarning",
    "ToolchainExecutionError",
]
