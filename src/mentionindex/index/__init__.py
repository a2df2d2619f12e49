"""Index module - workspace file snapshot and mention search.

This module provides:
- Snapshot construction from a pruned workspace walk
- TTL and change-notification driven invalidation
- Directory browse and ranked substring search

Public API is in `mentionindex.index.ops`:
- FileIndexEngine: snapshot lifecycle and query surface
- SnapshotState: snapshot validity

Internal implementations are in `mentionindex.index._internal/`.
"""

from mentionindex.index.models import (
    ROOT,
    EntryKind,
    FileEntry,
    FolderContent,
    Snapshot,
    normalize_scope,
)
from mentionindex.index.ops import FileIndexEngine, SnapshotState
from mentionindex.index.workspace import WorkspaceRoots

__all__ = [
    # Engine
    "FileIndexEngine",
    "SnapshotState",
    "WorkspaceRoots",
    # Models
    "ROOT",
    "EntryKind",
    "FileEntry",
    "FolderContent",
    "Snapshot",
    "normalize_scope",
]
