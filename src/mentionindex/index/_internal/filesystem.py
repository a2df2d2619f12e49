"""Filesystem collaborator: enumeration, single-directory listing, watching.

The engine only talks to the ``FileSystem`` protocol so tests can supply an
in-memory implementation. ``LocalFileSystem`` walks the real disk in a
worker thread and watches it with ``FileWatcher``.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from mentionindex.index.models import join_relative

if TYPE_CHECKING:
    from mentionindex.config.models import WatcherConfig
    from mentionindex.index._internal.ignore import IgnoreChecker


@dataclass(frozen=True, slots=True)
class Enumeration:
    """Result of a bulk enumeration."""

    paths: list[str]  # POSIX paths relative to the root
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class DirEntry:
    """A single child returned by a direct directory listing."""

    name: str
    is_dir: bool


class ChangeSubscription(Protocol):
    """Cancellable change-notification subscription."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...


class FileSystem(Protocol):
    """Filesystem capabilities consumed by the index engine."""

    async def enumerate_files(
        self, root: Path, checker: IgnoreChecker, max_files: int
    ) -> Enumeration:
        """Recursively list non-excluded files under root, up to max_files.

        Raises:
            OSError: If any directory cannot be read.
        """
        ...

    async def list_directory(self, path: Path) -> list[DirEntry]:
        """List the immediate children of one directory.

        Raises:
            OSError: If the directory cannot be read.
        """
        ...

    def watch(
        self,
        root: Path,
        checker: IgnoreChecker,
        on_change: Callable[[list[str]], None],
        config: WatcherConfig,
    ) -> ChangeSubscription: ...


def _raise_walk_error(error: OSError) -> None:
    raise error


def walk_tree(
    root: Path, checker: IgnoreChecker, *, strict: bool = True
) -> Iterator[tuple[str, list[str], list[str]]]:
    """Yield ``(rel_dir, subdirs, filenames)`` for every non-pruned directory.

    Both lists are sorted and ``subdirs`` is already pruned. With ``strict``
    an unreadable directory raises ``OSError``; otherwise it is skipped.
    """
    onerror = _raise_walk_error if strict else None
    for dirpath, dirnames, filenames in os.walk(root, onerror=onerror):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        if rel_dir == ".":
            rel_dir = ""
        dirnames[:] = sorted(
            d for d in dirnames if not checker.should_prune_dir(join_relative(rel_dir, d))
        )
        yield rel_dir, dirnames, sorted(filenames)


def walk_files(root: Path, checker: IgnoreChecker, max_files: int) -> Enumeration:
    """Walk root with in-place pruning. Blocking; run in a worker thread."""
    paths: list[str] = []
    for rel_dir, _subdirs, filenames in walk_tree(root, checker):
        for filename in filenames:
            rel_path = join_relative(rel_dir, filename)
            if checker.should_ignore_file(rel_path):
                continue
            if len(paths) >= max_files:
                return Enumeration(paths=paths, truncated=True)
            paths.append(rel_path)

    return Enumeration(paths=paths, truncated=False)


def scan_directory(path: Path) -> list[DirEntry]:
    """List one directory. Blocking; run in a worker thread."""
    entries: list[DirEntry] = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            entries.append(DirEntry(name=entry.name, is_dir=is_dir))
    return entries


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    async def enumerate_files(
        self, root: Path, checker: IgnoreChecker, max_files: int
    ) -> Enumeration:
        return await asyncio.to_thread(walk_files, root, checker, max_files)

    async def list_directory(self, path: Path) -> list[DirEntry]:
        return await asyncio.to_thread(scan_directory, path)

    def watch(
        self,
        root: Path,
        checker: IgnoreChecker,
        on_change: Callable[[list[str]], None],
        config: WatcherConfig,
    ) -> ChangeSubscription:
        from mentionindex.index._internal.watcher import FileWatcher

        return FileWatcher(
            root=root,
            checker=checker,
            on_change=on_change,
            poll_interval=config.poll_interval_sec,
            debounce_window=config.debounce_sec,
            max_debounce_wait=config.max_debounce_sec,
            stop_timeout=config.stop_timeout_sec,
        )
