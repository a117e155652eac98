"""apidiff error types with typed error codes.

Error code ranges:
- 1xxx: Reference
- 2xxx: Config
- 3xxx: Materialize
- 4xxx: Extract
- 5xxx: Orchestration
- 6xxx: Render / output
"""

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Reference (1xxx)
    INVALID_REFERENCE = 1001
    UNKNOWN_REFERENCE = 1002

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Materialize (3xxx)
    PATH_CONFLICT = 3001
    MATERIALIZATION_FAILED = 3002
    RELEASE_FAILED = 3003

    # Extract (4xxx)
    EXTRACTION_FAILED = 4001
    EXTRACTION_OUTPUT_INVALID = 4002

    # Orchestration (5xxx)
    TASK_FAILED = 5001

    # Render / output (6xxx)
    RENDER_FAILED = 6001
    OUTPUT_WRITE_FAILED = 6002


@dataclass(frozen=True, slots=True)
class ApiDiffError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PATH_CONFLICT')."""
        return self.code.name

    @property
    def branch(self) -> str | None:
        return self.details.get("branch")

    @property
    def phase(self) -> str | None:
        return self.details.get("phase")

    def with_context(self, **context: Any) -> "ApiDiffError":
        """Return a copy with extra details; existing keys are kept."""
        merged = {**context, **self.details}
        return dataclasses.replace(self, details=merged)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        where = [self.details[k] for k in ("branch", "phase") if self.details.get(k)]
        prefix = f"({'/'.join(where)}) " if where else ""
        return f"[{self.code.value}] {self.error_name}: {prefix}{self.message}"


class RefError(ApiDiffError):
    """Reference validation and resolution errors."""

    @classmethod
    def invalid(cls, ref: str, reason: str) -> "RefError":
        return cls(
            code=ErrorCode.INVALID_REFERENCE,
            message=f"Invalid reference {ref!r}: {reason}",
            details={"reference": ref, "reason": reason, "phase": "validate"},
        )

    @classmethod
    def unknown(cls, ref: str) -> "RefError":
        return cls(
            code=ErrorCode.UNKNOWN_REFERENCE,
            message=f"Reference {ref!r} does not resolve to a commit",
            details={"reference": ref},
        )


class ConfigError(ApiDiffError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class MaterializeError(ApiDiffError):
    """Working copy creation and removal errors."""

    @classmethod
    def path_conflict(cls, path: str) -> "MaterializeError":
        return cls(
            code=ErrorCode.PATH_CONFLICT,
            message=f"Destination already exists and is not an empty directory: {path}",
            details={"path": path},
        )

    @classmethod
    def failed(cls, ref: str, reason: str) -> "MaterializeError":
        return cls(
            code=ErrorCode.MATERIALIZATION_FAILED,
            message=f"Failed to check out {ref!r}: {reason}",
            details={"reference": ref, "reason": reason},
        )

    @classmethod
    def temp_root_failed(cls, path: str, reason: str) -> "MaterializeError":
        return cls(
            code=ErrorCode.MATERIALIZATION_FAILED,
            message=f"Cannot prepare temporary root {path}: {reason}",
            details={"path": path, "reason": reason, "phase": "materialize"},
        )

    @classmethod
    def release_failed(cls, path: str, reason: str) -> "MaterializeError":
        return cls(
            code=ErrorCode.RELEASE_FAILED,
            message=f"Failed to remove working copy {path}: {reason}",
            details={"path": path, "reason": reason, "phase": "release"},
        )


class ExtractionError(ApiDiffError):
    """Symbol extraction engine errors."""

    @classmethod
    def failed(
        cls, command: list[str], diagnostics: str, returncode: int | None = None
    ) -> "ExtractionError":
        status = f"exit status {returncode}" if returncode is not None else "did not complete"
        return cls(
            code=ErrorCode.EXTRACTION_FAILED,
            message=f"Extraction engine {command[0]!r} failed ({status})",
            details={
                "command": command,
                "returncode": returncode,
                "diagnostics": diagnostics,
            },
        )

    @classmethod
    def output_invalid(cls, reason: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACTION_OUTPUT_INVALID,
            message=f"Extraction engine output could not be parsed: {reason}",
            details={"reason": reason},
        )

    @property
    def diagnostics(self) -> str:
        return str(self.details.get("diagnostics", ""))


class TaskError(ApiDiffError):
    """A worker task did not run to completion."""

    @classmethod
    def failed(cls, branch: str, reason: str) -> "TaskError":
        return cls(
            code=ErrorCode.TASK_FAILED,
            message=f"Worker for {branch} terminated abnormally: {reason}",
            details={"branch": branch, "reason": reason},
        )


class RenderError(ApiDiffError):
    """Template loading and rendering errors."""

    @classmethod
    def failed(cls, template: str, reason: str) -> "RenderError":
        return cls(
            code=ErrorCode.RENDER_FAILED,
            message=f"Rendering template {template} failed: {reason}",
            details={"template": template, "reason": reason, "phase": "render"},
        )


class OutputError(ApiDiffError):
    """Output sink errors."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "OutputError":
        return cls(
            code=ErrorCode.OUTPUT_WRITE_FAILED,
            message=f"Cannot write output to {path}: {reason}",
            details={"path": path, "reason": reason, "phase": "output"},
        )


def error_chain(error: BaseException) -> list[str]:
    """Messages for an error and its causes, outermost first."""
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current) or type(current).__name__
        messages.append(text)
        current = current.__cause__
    return messages
