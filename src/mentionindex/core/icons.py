"""Icon lookup for mention suggestions.

Icons are a pure function of the entry kind and, for files, the extension
(case-insensitive). Compound suffixes such as ``.d.ts`` are checked before
the plain extension; dotfiles like ``.env`` match on their whole name.
"""

from __future__ import annotations

from pathlib import PurePosixPath

FOLDER_ICON = "📁"
DEFAULT_FILE_ICON = "📄"

_CODE = "📜"
_CONFIG = "⚙️"
_DOC = "📝"
_DATA = "📊"
_IMAGE = "🖼️"
_STYLE = "🎨"
_WEB = "🌐"
_SHELL = "💻"
_ARCHIVE = "📦"
_LOCK = "🔒"

EXTENSION_TO_ICON: dict[str, str] = {
    # Source code
    ".py": "🐍",
    ".pyi": "🐍",
    ".ts": _CODE,
    ".tsx": _CODE,
    ".js": _CODE,
    ".jsx": _CODE,
    ".mjs": _CODE,
    ".cjs": _CODE,
    ".go": _CODE,
    ".rs": "🦀",
    ".java": "☕",
    ".kt": _CODE,
    ".rb": "💎",
    ".c": _CODE,
    ".h": _CODE,
    ".cpp": _CODE,
    ".hpp": _CODE,
    ".cs": _CODE,
    ".swift": _CODE,
    ".php": _CODE,
    ".lua": _CODE,
    ".sql": _DATA,
    # Shell
    ".sh": _SHELL,
    ".bash": _SHELL,
    ".zsh": _SHELL,
    ".ps1": _SHELL,
    ".bat": _SHELL,
    # Web
    ".html": _WEB,
    ".htm": _WEB,
    ".vue": _WEB,
    ".svelte": _WEB,
    ".css": _STYLE,
    ".scss": _STYLE,
    ".sass": _STYLE,
    ".less": _STYLE,
    # Config
    ".json": _CONFIG,
    ".jsonc": _CONFIG,
    ".yaml": _CONFIG,
    ".yml": _CONFIG,
    ".toml": _CONFIG,
    ".ini": _CONFIG,
    ".cfg": _CONFIG,
    ".xml": _CONFIG,
    # Docs
    ".md": _DOC,
    ".mdx": _DOC,
    ".rst": _DOC,
    ".txt": _DOC,
    ".pdf": _DOC,
    # Data
    ".csv": _DATA,
    ".tsv": _DATA,
    ".parquet": _DATA,
    ".ipynb": _DATA,
    # Images
    ".png": _IMAGE,
    ".jpg": _IMAGE,
    ".jpeg": _IMAGE,
    ".gif": _IMAGE,
    ".svg": _IMAGE,
    ".ico": _IMAGE,
    ".webp": _IMAGE,
    # Archives
    ".zip": _ARCHIVE,
    ".tar": _ARCHIVE,
    ".gz": _ARCHIVE,
    ".tgz": _ARCHIVE,
    # Locks
    ".lock": _LOCK,
}

# Dotfiles have no suffix, so they are looked up by whole name
_DOTFILE_TO_ICON: dict[str, str] = {
    ".env": _CONFIG,
    ".editorconfig": _CONFIG,
    ".gitignore": _CONFIG,
    ".gitattributes": _CONFIG,
    ".npmrc": _CONFIG,
    ".prettierrc": _CONFIG,
    ".bashrc": _SHELL,
    ".zshrc": _SHELL,
}

# Longer compounds checked first
_COMPOUND_SUFFIXES: dict[str, str] = {
    ".d.ts": _CODE,
    ".tar.gz": _ARCHIVE,
}


def icon_for_file(name: str) -> str:
    """Return the icon for a file name, or the generic file icon."""
    lowered = name.lower()
    if lowered in _DOTFILE_TO_ICON:
        return _DOTFILE_TO_ICON[lowered]
    for suffix, icon in _COMPOUND_SUFFIXES.items():
        if lowered.endswith(suffix):
            return icon
    ext = PurePosixPath(lowered).suffix
    if not ext:
        return DEFAULT_FILE_ICON
    return EXTENSION_TO_ICON.get(ext, DEFAULT_FILE_ICON)


def icon_for(name: str, *, is_folder: bool) -> str:
    if is_folder:
        return FOLDER_ICON
    return icon_for_file(name)


__all__ = [
    "DEFAULT_FILE_ICON",
    "EXTENSION_TO_ICON",
    "FOLDER_ICON",
    "icon_for",
    "icon_for_file",
]
