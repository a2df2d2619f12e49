"""Config module exports."""

from mentionindex.config.loader import load_config
from mentionindex.config.models import (
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    MentionIndexConfig,
    SearchConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "MentionIndexConfig",
    "SearchConfig",
    "WatcherConfig",
]
