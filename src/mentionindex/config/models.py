"""Configuration sections and their defaults.

Values here are the lowest layer; see ``loader.py`` for the YAML, env and
kwarg layers above them. Any scalar field can be set from the environment:

    MENTIONINDEX__LOGGING__LEVEL=DEBUG
    MENTIONINDEX__INDEX__TTL_SEC=10
    MENTIONINDEX__INDEX__MAX_FILES=50000
    MENTIONINDEX__WATCHER__ENABLED=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from mentionindex.config.constants import MAX_FILES_LIMIT, SEARCH_MAX_RESULTS, TTL_MIN_SEC
from mentionindex.core.excludes import DEFAULT_EXCLUDE_PATTERNS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """One log sink. Lists of sinks only come from YAML."""

    format: Literal["json", "console"] = "console"
    # "stderr", "stdout", or an absolute file path (~ is expanded)
    destination: str = "stderr"
    # None means the root level applies
    level: LogLevel | None = None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, value: str) -> str:
        if value in ("stderr", "stdout"):
            return value
        expanded = Path(value).expanduser()
        if not expanded.is_absolute():
            raise ValueError(f"log file path must be absolute, got {value!r}")
        return str(expanded)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        MENTIONINDEX__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every build and query.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Snapshot construction and freshness.

    Env vars:
        MENTIONINDEX__INDEX__TTL_SEC: Seconds a snapshot stays valid
        MENTIONINDEX__INDEX__MAX_FILES: Hard cap on files enumerated per build
        MENTIONINDEX__INDEX__FALLBACK_ON_TRUNCATION: Browse via direct listing when capped
    """

    ttl_sec: float = Field(
        default=5.0,
        description="Seconds a snapshot stays valid without change notifications. "
        "0 rebuilds on every query.",
    )
    max_files: int = Field(
        default=20_000,
        description="Maximum files enumerated per build. "
        "RISK: High values increase memory and build latency on huge workspaces.",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Glob exclusion patterns. Directory patterns end with '/'; "
        "'!pattern' opts a path back in. VCS directories are always excluded.",
    )
    extra_exclude_patterns: list[str] = Field(
        default_factory=list,
        description="Patterns appended to exclude_patterns.",
    )
    fallback_on_truncation: bool = Field(
        default=True,
        description="When the file cap was reached, browse directories by listing "
        "them directly instead of trusting the truncated snapshot.",
    )

    @field_validator("ttl_sec")
    @classmethod
    def validate_ttl(cls, v: float) -> float:
        if v < TTL_MIN_SEC:
            raise ValueError(f"ttl_sec must be >= {TTL_MIN_SEC}, got {v}")
        return v

    @field_validator("max_files")
    @classmethod
    def validate_max_files(cls, v: int) -> int:
        if not (1 <= v <= MAX_FILES_LIMIT):
            raise ValueError(f"max_files must be 1-{MAX_FILES_LIMIT}, got {v}")
        return v

    @property
    def all_exclude_patterns(self) -> list[str]:
        return [*self.exclude_patterns, *self.extra_exclude_patterns]


class SearchConfig(BaseModel):
    """Ranked search configuration.

    Env vars:
        MENTIONINDEX__SEARCH__MAX_RESULTS: Results per query (<= 50)
    """

    max_results: int = Field(
        default=SEARCH_MAX_RESULTS,
        description=f"Results returned per query. Hard maximum: {SEARCH_MAX_RESULTS}.",
    )

    @field_validator("max_results")
    @classmethod
    def validate_max_results(cls, v: int) -> int:
        if not (1 <= v <= SEARCH_MAX_RESULTS):
            raise ValueError(f"max_results must be 1-{SEARCH_MAX_RESULTS}, got {v}")
        return v


class WatcherConfig(BaseModel):
    """Filesystem watcher configuration.

    Env vars:
        MENTIONINDEX__WATCHER__ENABLED: Watch the workspace for changes
        MENTIONINDEX__WATCHER__DEBOUNCE_SEC: Quiet window before invalidating
        MENTIONINDEX__WATCHER__MAX_DEBOUNCE_SEC: Max delay under continuous changes
        MENTIONINDEX__WATCHER__POLL_INTERVAL_SEC: mtime poll interval (cross-filesystem)
        MENTIONINDEX__WATCHER__REBUILD_ON_CHANGE: Rebuild in the background after changes
    """

    enabled: bool = Field(
        default=True,
        description="Invalidate the snapshot eagerly on filesystem changes. "
        "When disabled only the TTL expires snapshots.",
    )
    debounce_sec: float = Field(
        default=0.3,
        description="Sliding window that coalesces bursts of changes into one invalidation.",
    )
    max_debounce_sec: float = Field(
        default=2.0,
        description="Maximum wait before flushing under continuous changes.",
    )
    poll_interval_sec: float = Field(
        default=1.0,
        description="Polling interval for cross-filesystem mounts (WSL /mnt/*, network shares).",
    )
    rebuild_on_change: bool = Field(
        default=True,
        description="Start the rebuild in the background right after an invalidation "
        "so the next keystroke finds a fresh snapshot.",
    )
    stop_timeout_sec: float = Field(
        default=2.0,
        description="Watcher shutdown timeout.",
    )


class MentionIndexConfig(BaseModel):
    """Root configuration for mentionindex."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
