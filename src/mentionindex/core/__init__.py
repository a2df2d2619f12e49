"""Core module exports."""

from mentionindex.core.errors import (
    ConfigError,
    ErrorCode,
    IndexBuildError,
    MentionIndexError,
)
from mentionindex.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "IndexBuildError",
    "MentionIndexError",
    # Logging
    "configure_logging",
    "get_logger",
]
