"""Text helpers for ``@`` mentions typed in the input panel."""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mentionindex.index.models import FileEntry

MENTION_PREFIX = "@"


def parent_path(path: str) -> str:
    """Parent of a relative path; ``""`` for top-level entries and the root."""
    path = path.replace("\\", "/").rstrip("/")
    if not path:
        return ""
    parent = posixpath.dirname(path)
    return "" if parent in (".", "/") else parent


def is_folder_navigation(query: str) -> bool:
    """A query ending in ``/`` means "open this folder" rather than "search"."""
    return query.endswith("/")


def extract_folder_path(query: str) -> str:
    """Folder path from a navigation query: ``@src/lib/`` -> ``src/lib``."""
    folder = query.removeprefix(MENTION_PREFIX)
    return folder.removesuffix("/")


def format_for_insertion(entry: FileEntry, add_trailing_slash: bool = False) -> str:
    """Mention text inserted for a picked suggestion.

    Folders get a trailing ``/`` when ``add_trailing_slash`` is set so the
    panel can keep navigating into them.
    """
    if entry.is_folder and add_trailing_slash:
        return f"{MENTION_PREFIX}{entry.relative_path}/"
    return f"{MENTION_PREFIX}{entry.relative_path}"
