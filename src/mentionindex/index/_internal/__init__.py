"""Internal components for the file index - not part of public API."""

from mentionindex.index._internal.browse import browse, list_directory_entries, needs_fallback
from mentionindex.index._internal.builder import assemble_snapshot, build_snapshot
from mentionindex.index._internal.filesystem import (
    ChangeSubscription,
    DirEntry,
    Enumeration,
    FileSystem,
    LocalFileSystem,
)
from mentionindex.index._internal.ignore import IgnoreChecker
from mentionindex.index._internal.search import rank_matches
from mentionindex.index._internal.watcher import FileWatcher

__all__ = [
    "ChangeSubscription",
    "DirEntry",
    "Enumeration",
    "FileSystem",
    "FileWatcher",
    "IgnoreChecker",
    "LocalFileSystem",
    "assemble_snapshot",
    "browse",
    "build_snapshot",
    "list_directory_entries",
    "needs_fallback",
    "rank_matches",
]
