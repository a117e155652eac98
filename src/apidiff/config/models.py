"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (APIDIFF__SECTION__KEY)
3. Repo YAML (.apidiff.yaml) or an explicit --config file
4. Global YAML (~/.config/apidiff/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    APIDIFF__<SECTION>__<KEY>=<VALUE>

Examples:
    APIDIFF__LOGGING__LEVEL=DEBUG
    APIDIFF__EXTRACTOR__OUTPUT_FORMAT=json
    APIDIFF__EXTRACTOR__TIMEOUT_SEC=900
    APIDIFF__WORKTREE__TEMPDIR_PREFIX=api-
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
OutputFormat = Literal["lines", "json"]

DEFAULT_EXTRACTOR_COMMAND = ["cargo", "+nightly", "public-api", "--simplified"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        APIDIFF__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. -v on the command line forces DEBUG.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractorConfig(BaseModel):
    """Symbol extraction engine configuration.

    Env vars:
        APIDIFF__EXTRACTOR__OUTPUT_FORMAT: lines or json
        APIDIFF__EXTRACTOR__TIMEOUT_SEC: Kill the engine after this many seconds
    """

    command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTRACTOR_COMMAND),
        description="Engine argv, run inside the working copy. '{path}' is replaced "
        "by the working copy path.",
    )
    output_format: OutputFormat = Field(
        default="lines",
        description="'lines' for cargo public-api style output (one item per line), "
        "'json' for the symbols JSON document.",
    )
    timeout_sec: float | None = Field(
        default=None,
        description="Engine timeout. Full builds are slow; None waits forever.",
    )
    env: dict[str, str] = Field(
        default_factory=dict,
        description="Extra environment variables for the engine process.",
    )

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: list[str]) -> list[str]:
        if not v or not v[0].strip():
            raise ValueError("Extractor command must name a program")
        return v

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class WorktreeConfig(BaseModel):
    """Working copy layout.

    Env vars:
        APIDIFF__WORKTREE__TEMPDIR_PREFIX: Prefix for generated temp roots
        APIDIFF__WORKTREE__GIT_TIMEOUT_SEC: Timeout for git worktree subprocesses
    """

    base_dirname: str = "base"
    target_dirname: str = "target"
    tempdir_prefix: str = "apidiff-"
    git_timeout_sec: float = Field(
        default=60.0,
        description="Timeout for git worktree add/remove and checkout subprocesses.",
    )

    @field_validator("base_dirname", "target_dirname")
    @classmethod
    def validate_dirname(cls, v: str) -> str:
        if not v or v in (".", "..") or "/" in v or "\\" in v:
            raise ValueError(f"Must be a single path component: {v!r}")
        return v

    @field_validator("git_timeout_sec")
    @classmethod
    def validate_git_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_distinct_dirs(self) -> "WorktreeConfig":
        if self.base_dirname == self.target_dirname:
            raise ValueError("base_dirname and target_dirname must differ")
        return self


class ApiDiffConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    worktree: WorktreeConfig = Field(default_factory=WorktreeConfig)
