"""Exclude pattern matching with tiered architecture.

Single source of truth for path exclusion used by:
- Snapshot enumeration (directory pruning, file filtering)
- Direct directory listing fallback
- FileWatcher (watched directory collection, change filtering)

Tiered Architecture:
- HARDCODED_DIRS: Always excluded, cannot be overridden (VCS, .mentionindex)
- Configured patterns: DEFAULT_EXCLUDE_PATTERNS unless replaced, with
  ``!pattern`` negation
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable

from mentionindex.core.excludes import DEFAULT_EXCLUDE_PATTERNS, HARDCODED_DIRS, is_hardcoded_dir
from mentionindex.index.models import SEPARATOR

__all__ = [
    "HARDCODED_DIRS",
    "IgnoreChecker",
]


class IgnoreChecker:
    """Checks if workspace paths should be excluded.

    Pattern syntax:
    - ``name/`` prunes directories named ``name`` at any depth; ``a/b/`` prunes
      the directory at that relative path
    - Other patterns match files: against the file name, or against the
      relative path when the pattern contains ``/``
    - Negation with ``!`` prefix re-includes a path matched by an earlier
      pattern (it cannot re-include hardcoded directories)
    """

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        self._dir_patterns: list[str] = []
        self._file_patterns: list[str] = []
        self._negated_dirs: list[str] = []
        self._negated_files: list[str] = []
        for raw in DEFAULT_EXCLUDE_PATTERNS if patterns is None else patterns:
            self._add_pattern(raw)

    def _add_pattern(self, raw: str) -> None:
        line = raw.strip()
        if not line or line.startswith("#"):
            return

        is_negation = line.startswith("!")
        if is_negation:
            line = line[1:]

        # Leading "/" anchors at the root; paths are already root-relative
        line = line.lstrip("/")
        if not line:
            return

        if line.endswith("/"):
            target = self._negated_dirs if is_negation else self._dir_patterns
            target.append(line.rstrip("/"))
        else:
            target = self._negated_files if is_negation else self._file_patterns
            target.append(line)

    @staticmethod
    def _matches(rel_path: str, name: str, pattern: str) -> bool:
        if SEPARATOR in pattern:
            return fnmatch.fnmatchcase(rel_path, pattern)
        return fnmatch.fnmatchcase(name, pattern)

    def should_prune_dir(self, rel_dir: str) -> bool:
        """Check if a directory should be skipped during traversal.

        Args:
            rel_dir: Directory path relative to the workspace root (POSIX)
        """
        name = rel_dir.rpartition(SEPARATOR)[2]
        if is_hardcoded_dir(name):
            return True
        if not any(self._matches(rel_dir, name, p) for p in self._dir_patterns):
            return False
        return not any(self._matches(rel_dir, name, p) for p in self._negated_dirs)

    def should_ignore_file(self, rel_path: str) -> bool:
        """Check if a file should be left out of the index.

        Only the file itself is checked; callers prune ancestor directories
        during traversal.
        """
        name = rel_path.rpartition(SEPARATOR)[2]
        if not any(self._matches(rel_path, name, p) for p in self._file_patterns):
            return False
        return not any(self._matches(rel_path, name, p) for p in self._negated_files)

    def is_excluded_rel(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check a relative path including all of its ancestor directories."""
        rel_path = rel_path.replace("\\", SEPARATOR).strip(SEPARATOR)
        if not rel_path:
            return False
        parts = rel_path.split(SEPARATOR)
        for i in range(1, len(parts)):
            if self.should_prune_dir(SEPARATOR.join(parts[:i])):
                return True
        if is_dir:
            return self.should_prune_dir(rel_path)
        return self.should_ignore_file(rel_path)
