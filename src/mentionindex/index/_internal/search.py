"""Ranked substring search over a snapshot.

Matching is case-insensitive and restricted to the scope subtree:
- a file matches when the query occurs in its relative path (which covers
  its name and every path segment)
- a folder matches when its own segment starts with the query, so only
  segments that really are directories ever surface as folders

Ranking is a stable sort on (exact name match, folders first, name,
relative path). The result is cut to ``max_results`` only after ranking.
"""

from __future__ import annotations

from mentionindex.config.constants import SEARCH_MAX_RESULTS
from mentionindex.index._internal.browse import make_folder_entry
from mentionindex.index.models import (
    ROOT,
    SEPARATOR,
    EntryKind,
    FileEntry,
    Snapshot,
    name_sort_key,
)


def _in_scope(relative_path: str, prefix: str) -> bool:
    return not prefix or relative_path.startswith(prefix)


def rank_key(entry: FileEntry, needle: str) -> tuple[bool, bool, str, str, str]:
    return (
        entry.name.casefold() != needle,
        entry.kind is not EntryKind.FOLDER,
        *name_sort_key(entry.name),
        entry.relative_path,
    )


def collect_matches(snapshot: Snapshot, needle: str, scope: str = ROOT) -> list[FileEntry]:
    """All folders and files in scope matching the casefolded ``needle``, unranked."""
    prefix = f"{scope}{SEPARATOR}" if scope else ""
    seen: set[str] = set()
    matches: list[FileEntry] = []

    for directory in snapshot.directory_index:
        if directory == ROOT or directory in snapshot.file_paths:
            continue
        if not _in_scope(directory, prefix) or directory in seen:
            continue
        name = directory.rpartition(SEPARATOR)[2]
        if name.casefold().startswith(needle):
            seen.add(directory)
            matches.append(make_folder_entry(snapshot.root, directory))

    for entry in snapshot.files:
        if not _in_scope(entry.relative_path, prefix) or entry.relative_path in seen:
            continue
        if needle in entry.relative_path.casefold():
            seen.add(entry.relative_path)
            matches.append(entry)

    return matches


def rank_matches(
    snapshot: Snapshot,
    query: str,
    scope: str = ROOT,
    *,
    max_results: int = SEARCH_MAX_RESULTS,
) -> list[FileEntry]:
    """Top ``max_results`` entries in scope matching ``query``, best first."""
    needle = query.casefold()
    if not needle:
        return []
    matches = collect_matches(snapshot, needle, scope)
    matches.sort(key=lambda e: rank_key(e, needle))
    return matches[: min(max_results, SEARCH_MAX_RESULTS)]
