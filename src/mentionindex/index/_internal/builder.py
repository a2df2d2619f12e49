"""Snapshot construction from a flat list of workspace file paths."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog

from mentionindex.core.errors import IndexBuildError
from mentionindex.core.icons import icon_for_file
from mentionindex.index.models import (
    ROOT,
    EntryKind,
    FileEntry,
    Snapshot,
    name_sort_key,
    split_relative,
)

if TYPE_CHECKING:
    from mentionindex.index._internal.filesystem import FileSystem
    from mentionindex.index._internal.ignore import IgnoreChecker

logger = structlog.get_logger()


def make_file_entry(root: str, relative_path: str) -> FileEntry:
    _parent, name = split_relative(relative_path)
    return FileEntry(
        name=name,
        full_path=str(Path(root, *relative_path.split("/"))),
        relative_path=relative_path,
        kind=EntryKind.FILE,
        icon=icon_for_file(name),
    )


def assemble_snapshot(
    root: str,
    relative_paths: Iterable[str],
    *,
    truncated: bool = False,
    generation: int = 0,
    timestamp: float = 0.0,
) -> Snapshot:
    """Build a Snapshot from POSIX relative file paths.

    Every file lands in ``files`` and in ``directory_index[parent]``; every
    ancestor directory gets a (possibly empty) ``directory_index`` entry so
    directories holding only subdirectories still show up when browsing.
    """
    unique_paths = sorted({p.strip("/") for p in relative_paths if p.strip("/")})
    file_paths = frozenset(unique_paths)

    files: list[FileEntry] = []
    directory_index: dict[str, list[FileEntry]] = {ROOT: []}

    for relative_path in unique_paths:
        entry = make_file_entry(root, relative_path)
        files.append(entry)

        parent, _name = split_relative(relative_path)
        directory_index.setdefault(parent, []).append(entry)

        # Ancestors of an indexed directory are already indexed
        ancestor = parent
        while ancestor:
            ancestor, _leaf = split_relative(ancestor)
            if ancestor in directory_index:
                break
            directory_index[ancestor] = []

    subdirectories: dict[str, set[str]] = {}
    for directory in directory_index:
        if directory == ROOT or directory in file_paths:
            continue
        parent, name = split_relative(directory)
        subdirectories.setdefault(parent, set()).add(name)

    return Snapshot(
        root=root,
        files=tuple(files),
        directory_index=MappingProxyType({d: tuple(v) for d, v in directory_index.items()}),
        subdirectories=MappingProxyType(
            {d: tuple(sorted(names, key=name_sort_key)) for d, names in subdirectories.items()}
        ),
        file_paths=file_paths,
        timestamp=timestamp,
        generation=generation,
        truncated=truncated,
    )


async def build_snapshot(
    root: str,
    filesystem: FileSystem,
    checker: IgnoreChecker,
    *,
    max_files: int,
    generation: int = 0,
    clock: Callable[[], float] = time.monotonic,
) -> Snapshot:
    """Enumerate the workspace and assemble a fresh Snapshot.

    An empty root yields an empty snapshot without touching the filesystem.

    Raises:
        IndexBuildError: If the root is missing or enumeration fails. No
            partial snapshot is produced.
    """
    started = clock()
    if not root:
        return Snapshot.empty("", timestamp=started, generation=generation)

    root_path = Path(root)
    try:
        enumeration = await filesystem.enumerate_files(root_path, checker, max_files)
    except OSError as e:
        raise IndexBuildError.from_os_error(root, e) from e

    snapshot = assemble_snapshot(
        root,
        enumeration.paths,
        truncated=enumeration.truncated,
        generation=generation,
        timestamp=started,
    )

    logger.debug(
        "snapshot_built",
        root=root,
        files=len(snapshot.files),
        directories=len(snapshot.directory_index),
        truncated=snapshot.truncated,
        duration_ms=round((clock() - started) * 1000, 1),
    )
    if snapshot.truncated:
        logger.warning("snapshot_truncated", root=root, max_files=max_files)

    return snapshot
