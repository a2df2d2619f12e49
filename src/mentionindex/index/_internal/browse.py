"""Directory browse: direct children of one directory.

Folders come from the snapshot's derived subdirectory index, files from
``directory_index``. When the snapshot cannot be trusted for a directory the
caller falls back to ``list_directory_entries``, a direct uncached listing.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from mentionindex.core.icons import icon_for
from mentionindex.index._internal.builder import make_file_entry
from mentionindex.index.models import (
    ROOT,
    EntryKind,
    FileEntry,
    Snapshot,
    join_relative,
    name_sort_key,
)

if TYPE_CHECKING:
    from mentionindex.index._internal.filesystem import DirEntry
    from mentionindex.index._internal.ignore import IgnoreChecker


def make_folder_entry(root: str, relative_path: str) -> FileEntry:
    name = relative_path.rpartition("/")[2]
    return FileEntry(
        name=name,
        full_path=str(Path(root, *relative_path.split("/"))),
        relative_path=relative_path,
        kind=EntryKind.FOLDER,
        icon=icon_for(name, is_folder=True),
    )


def entry_sort_key(entry: FileEntry) -> tuple[bool, str, str]:
    """Folders first, then case-insensitive name."""
    return (entry.kind is not EntryKind.FOLDER, *name_sort_key(entry.name))


def needs_fallback(snapshot: Snapshot, scope: str, *, fallback_on_truncation: bool = True) -> bool:
    """Whether browsing ``scope`` should bypass the snapshot.

    True when the snapshot was truncated at the file cap, or when it knows
    nothing about the directory (no file entry and no subdirectories).
    """
    if snapshot.truncated and fallback_on_truncation:
        return True
    return scope not in snapshot.directory_index and not snapshot.subdirectories.get(scope)


def browse(snapshot: Snapshot, scope: str = ROOT) -> list[FileEntry]:
    """Direct children of ``scope`` from the snapshot, folders first."""
    folders = [
        make_folder_entry(snapshot.root, join_relative(scope, name))
        for name in snapshot.subdirectories.get(scope, ())
        if join_relative(scope, name) not in snapshot.file_paths
    ]
    files = list(snapshot.directory_index.get(scope, ()))
    return sorted([*folders, *files], key=entry_sort_key)


def list_directory_entries(
    root: str,
    scope: str,
    children: list[DirEntry],
    checker: IgnoreChecker,
) -> list[FileEntry]:
    """Turn a direct directory listing into ordered, filtered entries."""
    entries: list[FileEntry] = []
    for child in children:
        rel_path = join_relative(scope, child.name)
        if child.is_dir:
            if checker.should_prune_dir(rel_path):
                continue
            entries.append(make_folder_entry(root, rel_path))
        else:
            if checker.should_ignore_file(rel_path):
                continue
            entries.append(make_file_entry(root, rel_path))
    entries.sort(key=entry_sort_key)
    return entries
