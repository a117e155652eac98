"""Config module exports."""

from apidiff.config.loader import load_config
from apidiff.config.models import (
    ApiDiffConfig,
    ExtractorConfig,
    LoggingConfig,
    WorktreeConfig,
)

__all__ = [
    "load_config",
    "ApiDiffConfig",
    "ExtractorConfig",
    "LoggingConfig",
    "WorktreeConfig",
]
