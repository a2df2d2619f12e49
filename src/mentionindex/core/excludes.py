"""Canonical exclude patterns with tiered architecture.

Tier 0 (HARDCODED_DIRS): Never traversed, not user-configurable.
    - VCS internals and our own config directory

Tier 1 (DEFAULT_EXCLUDE_PATTERNS): Excluded by default, configurable.
    - Dependency caches, build output, minified assets, OS noise
    - Users replace the list via ``index.exclude_patterns`` or extend it via
      ``index.extra_exclude_patterns``; ``!pattern`` opts a path back in

Pattern syntax (glob, matched with fnmatch against POSIX relative paths):
    - ``name/``      directory pattern, prunes any directory called ``name``
    - ``a/b/``       directory pattern anchored at the workspace root
    - ``*.min.js``   file pattern, matched against the file name
    - ``docs/*.pdf`` file pattern containing ``/``, matched against the path
"""

from __future__ import annotations

# =============================================================================
# Tier 0: HARDCODED - Never traverse, not user-configurable
# =============================================================================

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # mentionindex config
        ".mentionindex",
    )
)

# =============================================================================
# Tier 1: DEFAULT - Excluded by default, configurable
# =============================================================================

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    # -------------------------------------------------------------------------
    # Dependency caches
    # -------------------------------------------------------------------------
    "node_modules/",
    "bower_components/",
    ".pnpm-store/",
    ".yarn/",
    ".venv/",
    "venv/",
    "__pycache__/",
    ".pytest_cache/",
    ".mypy_cache/",
    ".ruff_cache/",
    ".tox/",
    ".nox/",
    "site-packages/",
    ".gradle/",
    ".m2/",
    ".dart_tool/",
    ".stack-work/",
    # -------------------------------------------------------------------------
    # Build output
    # -------------------------------------------------------------------------
    "dist/",
    "out/",
    "build/",
    "target/",
    ".next/",
    ".nuxt/",
    ".turbo/",
    "coverage/",
    ".nyc_output/",
    "htmlcov/",
    "*.egg-info/",
    # -------------------------------------------------------------------------
    # Minified and generated assets
    # -------------------------------------------------------------------------
    "*.min.js",
    "*.min.css",
    "*.map",
    "*.pyc",
    "*.pyo",
    "*.class",
    # -------------------------------------------------------------------------
    # OS files
    # -------------------------------------------------------------------------
    ".DS_Store",
    "Thumbs.db",
    "desktop.ini",
)


def is_hardcoded_dir(dirname: str) -> bool:
    """Check if directory is hardcoded (never traversable, not overridable)."""
    return dirname in HARDCODED_DIRS


__all__ = [
    "HARDCODED_DIRS",
    "DEFAULT_EXCLUDE_PATTERNS",
    "is_hardcoded_dir",
]
