"""Index data model: entries, snapshots, folder listings.

Relative paths are POSIX style (``/`` separated) and relative to the
workspace root; the root itself is the empty string.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

ROOT = ""
SEPARATOR = "/"


class EntryKind(Enum):
    """Kind of a mention suggestion."""

    FILE = "file"
    FOLDER = "folder"


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A single file or folder suggestion."""

    name: str
    full_path: str
    relative_path: str
    kind: EntryKind
    icon: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.kind is EntryKind.FOLDER

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the shape the panel expects."""
        return {
            "name": self.name,
            "fullPath": self.full_path,
            "relativePath": self.relative_path,
            "type": self.kind.value,
            "icon": self.icon,
        }


def _frozen_mapping(data: dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(data)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Immutable point-in-time index of workspace file paths.

    Attributes:
        root: Absolute workspace root the snapshot was built from
        files: File entries sorted by relative path
        directory_index: Directory path -> files living directly inside it.
            Every ancestor directory of every file is a key, even when it
            holds no direct files.
        subdirectories: Directory path -> sorted names of its immediate
            child directories. Names whose path is also a file are left out.
        file_paths: Relative paths of all files, for exclusivity checks
        timestamp: Monotonic clock reading taken when the build started
        generation: Invalidation generation the build started under
        truncated: True if enumeration stopped at the file cap
    """

    root: str
    files: tuple[FileEntry, ...] = ()
    directory_index: Mapping[str, tuple[FileEntry, ...]] = field(
        default_factory=lambda: _frozen_mapping({})
    )
    subdirectories: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _frozen_mapping({})
    )
    file_paths: frozenset[str] = frozenset()
    timestamp: float = 0.0
    generation: int = 0
    truncated: bool = False

    @classmethod
    def empty(cls, root: str = "", *, timestamp: float = 0.0, generation: int = 0) -> Snapshot:
        """Snapshot for a workspace with nothing to index."""
        directory_index: dict[str, tuple[FileEntry, ...]] = {ROOT: ()} if root else {}
        return cls(
            root=root,
            directory_index=_frozen_mapping(directory_index),
            timestamp=timestamp,
            generation=generation,
        )

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True, slots=True)
class FolderContent:
    """Direct children of a folder, for panel navigation."""

    path: str  # "/" for the workspace root
    parent_path: str
    items: list[FileEntry] = field(default_factory=list)


def join_relative(parent: str, name: str) -> str:
    """Join a relative directory and a child name with the canonical separator."""
    return f"{parent}{SEPARATOR}{name}" if parent else name


def split_relative(relative_path: str) -> tuple[str, str]:
    """Split into (parent directory, leaf name)."""
    parent, _, name = relative_path.rpartition(SEPARATOR)
    return parent, name


def name_sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive name order, raw name as tie-break."""
    return (name.casefold(), name)


def normalize_scope(scope: str | None) -> str:
    """Canonicalize a caller-supplied directory scope.

    Backslashes become ``/``, leading ``./`` and surrounding separators are
    dropped, and ``/`` or ``.`` mean the root.
    """
    if not scope:
        return ROOT
    normalized = scope.replace("\\", SEPARATOR).strip()
    parts = [p for p in normalized.split(SEPARATOR) if p and p != "."]
    return SEPARATOR.join(parts)


__all__ = [
    "ROOT",
    "SEPARATOR",
    "EntryKind",
    "FileEntry",
    "FolderContent",
    "Snapshot",
    "join_relative",
    "name_sort_key",
    "normalize_scope",
    "split_relative",
]
