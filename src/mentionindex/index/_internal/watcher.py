"""Workspace change notifications on top of watchfiles.

Only directories that survive pruning are watched, each with its own
non-recursive watch, so ``node_modules`` and friends cost nothing. A new
directory restarts ``awatch`` with a fresh list. Mounts where inotify is
unreliable (WSL drives, removable media, network shares) are polled by
mtime instead.

Raw notifications are collected in a ``ChangeBatch`` and handed to the
callback once the workspace has been quiet for ``debounce_window`` or the
oldest change has waited ``max_debounce_wait``.
"""

from __future__ import annotations

import asyncio
import contextlib
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from mentionindex.index._internal.filesystem import walk_tree
from mentionindex.index._internal.ignore import IgnoreChecker
from mentionindex.index.models import join_relative

logger = structlog.get_logger()

DEBOUNCE_WINDOW_SEC = 0.3
MAX_DEBOUNCE_WAIT_SEC = 2.0

_WSL_DRIVE = re.compile(r"^/mnt/[A-Za-z]/")
_POLLED_PREFIXES = ("/run/user/", "/media/", "/net/")


def _collect_watch_dirs(root: Path, checker: IgnoreChecker) -> list[Path]:
    """Root plus every non-pruned directory below it."""
    dirs = [root]
    for rel_dir, subdirs, _files in walk_tree(root, checker, strict=False):
        dirs.extend(root / join_relative(rel_dir, d) for d in subdirs)
    return dirs


def _is_cross_filesystem(path: Path) -> bool:
    resolved = path.resolve().as_posix()
    return bool(_WSL_DRIVE.match(resolved)) or resolved.startswith(_POLLED_PREFIXES)


@dataclass
class ChangeBatch:
    """Pending relative paths plus the timing needed for a sliding window."""

    quiet: float
    max_wait: float
    paths: set[str] = field(default_factory=set)
    first_at: float = 0.0
    last_at: float = 0.0

    def __bool__(self) -> bool:
        return bool(self.paths)

    def add(self, rel_path: str, now: float) -> None:
        if not self.paths:
            self.first_at = now
        self.paths.add(rel_path)
        self.last_at = now

    def seconds_until_due(self, now: float) -> float:
        """Zero once the window closed or the cap was reached."""
        due_at = min(self.last_at + self.quiet, self.first_at + self.max_wait)
        return max(0.0, due_at - now)

    def take(self) -> list[str]:
        paths = sorted(self.paths)
        self.paths.clear()
        return paths


@dataclass
class FileWatcher:
    """Watches ``root`` and reports batches of changed relative POSIX paths.

    Excluded paths never reach ``on_change``. A deleted directory is reported
    as itself, since its former children are unknown at that point.
    """

    root: Path
    on_change: Callable[[list[str]], None]
    checker: IgnoreChecker = field(default_factory=IgnoreChecker)
    poll_interval: float = 1.0
    debounce_window: float = DEBOUNCE_WINDOW_SEC
    max_debounce_wait: float = MAX_DEBOUNCE_WAIT_SEC
    stop_timeout: float = 2.0

    _batch: ChangeBatch = field(init=False)
    _pending: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _flush_task: asyncio.Task[None] | None = field(default=None, init=False)
    _watched_dirs: set[Path] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        self._batch = ChangeBatch(self.debounce_window, self.max_debounce_wait)

    @property
    def is_running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        if self._watch_task is not None:
            return
        self._stop_event.clear()
        polling = _is_cross_filesystem(self.root)
        loop = self._poll_loop() if polling else self._watch_loop()
        self._watch_task = asyncio.create_task(loop)
        self._flush_task = asyncio.create_task(self._flush_loop())
        logger.info(
            "file_watcher_started",
            root=str(self.root),
            mode="polling" if polling else "native",
            debounce_window=self.debounce_window,
        )

    async def stop(self) -> None:
        """Stop watching; whatever is still pending is delivered first."""
        self._stop_event.set()
        for task in (self._flush_task, self._watch_task):
            if task is None or task.done():
                continue
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                await asyncio.wait_for(task, timeout=self.stop_timeout)
        self._flush_task = None
        self._watch_task = None
        self._flush_pending()
        logger.info("file_watcher_stopped", root=str(self.root))

    def _queue_change(self, rel_path: str) -> None:
        self._batch.add(rel_path, time.monotonic())
        self._pending.set()

    def _should_flush(self) -> bool:
        return bool(self._batch) and self._batch.seconds_until_due(time.monotonic()) == 0.0

    def _flush_pending(self) -> None:
        if not self._batch:
            return
        paths = self._batch.take()
        logger.info("changes_detected", count=len(paths), sample=paths[:5])
        self.on_change(paths)

    async def _flush_loop(self) -> None:
        while True:
            await self._pending.wait()
            self._pending.clear()
            while self._batch:
                delay = self._batch.seconds_until_due(time.monotonic())
                if delay > 0:
                    await asyncio.sleep(delay)
                    continue
                self._flush_pending()

    def _relative(self, path: Path) -> str | None:
        if not path.is_relative_to(self.root):
            return None
        rel = path.relative_to(self.root).as_posix()
        return "" if rel == "." else rel

    async def _watch_loop(self) -> None:
        while not self._stop_event.is_set():
            watch_dirs = await asyncio.to_thread(_collect_watch_dirs, self.root, self.checker)
            self._watched_dirs = set(watch_dirs)
            logger.debug("watch_dirs_collected", count=len(watch_dirs), root=str(self.root))
            try:
                async for changes in awatch(
                    *watch_dirs,
                    recursive=False,
                    stop_event=self._stop_event,
                    ignore_permission_denied=True,
                ):
                    if self._handle_changes(changes):
                        logger.info("watcher_restart_requested", reason="new_directories")
                        break
            except (OSError, RuntimeError) as e:
                # A watched directory vanished between the walk and awatch
                if self._stop_event.is_set():
                    return
                logger.warning("watcher_error", error=str(e), root=str(self.root))
                await asyncio.sleep(self.poll_interval)

    def _handle_changes(self, changes: set[tuple[Change, str]]) -> bool:
        """Queue relevant changes; True when a new directory needs a watch."""
        restart = False
        for change, raw in changes:
            path = Path(raw)
            rel_path = self._relative(path)
            if not rel_path:
                continue

            if change == Change.added and path.is_dir():
                if self.checker.is_excluded_rel(rel_path, is_dir=True):
                    continue
                restart = restart or path not in self._watched_dirs
                self._queue_change(rel_path)
            elif change == Change.deleted and path in self._watched_dirs:
                self._queue_change(rel_path)
            elif not self.checker.is_excluded_rel(rel_path):
                self._queue_change(rel_path)

        if restart:
            logger.debug("new_directory_detected", root=str(self.root))
        return restart

    async def _poll_loop(self) -> None:
        previous = await asyncio.to_thread(self._scan_mtimes)
        while not self._stop_event.is_set():
            await asyncio.sleep(self.poll_interval)
            current = await asyncio.to_thread(self._scan_mtimes)
            changed = {p for p, mtime in current.items() if previous.get(p) != mtime}
            for rel_path in sorted(changed | (previous.keys() - current.keys())):
                self._queue_change(rel_path)
            previous = current

    def _scan_mtimes(self) -> dict[str, float]:
        mtimes: dict[str, float] = {}
        for rel_dir, _subdirs, filenames in walk_tree(self.root, self.checker, strict=False):
            for filename in filenames:
                rel_path = join_relative(rel_dir, filename)
                if self.checker.should_ignore_file(rel_path):
                    continue
                with contextlib.suppress(OSError):
                    mtimes[rel_path] = (self.root / rel_path).stat().st_mtime
        return mtimes
