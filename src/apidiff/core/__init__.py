"""Core module exports."""

from apidiff.core.errors import (
    ApiDiffError,
    ConfigError,
    ErrorCode,
    ExtractionError,
    MaterializeError,
    OutputError,
    RefError,
    RenderError,
    TaskError,
    error_chain,
)
from apidiff.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ApiDiffError",
    "ConfigError",
    "ErrorCode",
    "ExtractionError",
    "MaterializeError",
    "OutputError",
    "RefError",
    "RenderError",
    "TaskError",
    "error_chain",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
