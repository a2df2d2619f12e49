"""Exceptions raised by mentionindex.

Every error carries an ``ErrorCode``; codes are grouped by thousands:
config problems are 2xxx and snapshot-build problems are 3xxx.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any


class ErrorCode(IntEnum):
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003

    INDEX_ENUMERATION_FAILED = 3001
    INDEX_ROOT_MISSING = 3002


@dataclass(frozen=True, slots=True)
class MentionIndexError(Exception):
    """Base class; immutable so one instance can be logged and re-raised safely."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form used in structured logs."""
        return {
            "code": int(self.code),
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.error_name}: {self.message}"


class ConfigError(MentionIndexError):
    """Bad or unreadable configuration. Raised only by ``load_config``."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            ErrorCode.CONFIG_PARSE_ERROR,
            f"{path} is not a valid YAML mapping: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            ErrorCode.CONFIG_INVALID_VALUE,
            f"Bad value for {field} ({value!r}): {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            ErrorCode.CONFIG_FILE_NOT_FOUND,
            f"No config file at {path}",
            details={"path": path},
        )


class IndexBuildError(MentionIndexError):
    """Snapshot construction failures.

    Raised by the builder and always handled inside the engine; search
    callers only ever see fewer (or no) results.
    """

    @classmethod
    def enumeration_failed(cls, root: str, reason: str) -> "IndexBuildError":
        return cls(
            ErrorCode.INDEX_ENUMERATION_FAILED,
            f"Could not list files under {root}: {reason}",
            retryable=True,
            details={"root": root, "reason": reason},
        )

    @classmethod
    def root_missing(cls, root: str) -> "IndexBuildError":
        return cls(
            ErrorCode.INDEX_ROOT_MISSING,
            f"Workspace root {root} is gone or not a directory",
            retryable=True,
            details={"root": root},
        )

    @classmethod
    def from_os_error(cls, root: str, error: OSError) -> "IndexBuildError":
        """Classify a failed walk: a vanished root or an unreadable subtree."""
        if isinstance(error, FileNotFoundError | NotADirectoryError) and not Path(root).is_dir():
            return cls.root_missing(root)
        reason = error.strerror or str(error)
        if error.filename:
            reason = f"{reason}: {error.filename}"
        return cls.enumeration_failed(root, reason)
