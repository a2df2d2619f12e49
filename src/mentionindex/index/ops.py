"""File index engine: snapshot lifecycle and the public query surface.

Snapshot validity moves through ``ABSENT -> BUILDING -> VALID -> STALE ->
BUILDING -> ...``. Freshness is tracked with an invalidation generation: every
change signal, manual invalidation or workspace switch bumps it, and a
snapshot only serves queries while its generation is current and its TTL has
not run out. One build runs at a time; concurrent queries await the same
build task.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from mentionindex.config.models import MentionIndexConfig
from mentionindex.core.errors import IndexBuildError
from mentionindex.core.logging import query_context
from mentionindex.index._internal.browse import browse, list_directory_entries, needs_fallback
from mentionindex.index._internal.builder import build_snapshot
from mentionindex.index._internal.filesystem import LocalFileSystem
from mentionindex.index._internal.ignore import IgnoreChecker
from mentionindex.index._internal.search import rank_matches
from mentionindex.index.models import FileEntry, FolderContent, Snapshot, normalize_scope
from mentionindex.index.workspace import WorkspaceRoots
from mentionindex.mentions import parent_path

if TYPE_CHECKING:
    from mentionindex.index._internal.filesystem import ChangeSubscription, FileSystem

logger = structlog.get_logger()


class SnapshotState(Enum):
    """Snapshot validity."""

    ABSENT = "absent"
    BUILDING = "building"
    VALID = "valid"
    STALE = "stale"


@dataclass
class FileIndexEngine:
    """
    Workspace file index answering ``@`` mention queries.

    Design:
    - Snapshot is immutable and swapped wholesale when a build completes
    - Builds are single-flight and shielded from caller cancellation
    - A query issued after an invalidation never sees an older snapshot
    - Enumeration failures degrade to empty results, never exceptions
    - The watcher subscription only ever invalidates; it never patches
    """

    workspace: WorkspaceRoots
    filesystem: FileSystem = field(default_factory=LocalFileSystem)
    config: MentionIndexConfig = field(default_factory=MentionIndexConfig)
    clock: Callable[[], float] = time.monotonic

    build_count: int = field(default=0, init=False)
    _root: str = field(default="", init=False)
    _checker: IgnoreChecker = field(init=False)
    _snapshot: Snapshot | None = field(default=None, init=False)
    _generation: int = field(default=0, init=False)
    _build_task: asyncio.Task[Snapshot | None] | None = field(default=None, init=False)
    _build_generation: int = field(default=0, init=False)
    _rebuild_task: asyncio.Task[None] | None = field(default=None, init=False)
    _watcher_task: asyncio.Task[None] | None = field(default=None, init=False)
    _subscription: ChangeSubscription | None = field(default=None, init=False)
    _unsubscribe_workspace: Callable[[], None] | None = field(default=None, init=False)
    _started: bool = field(default=False, init=False)
    _disposed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self._root = self.workspace.root
        self._checker = IgnoreChecker(self.config.index.all_exclude_patterns)
        self._unsubscribe_workspace = self.workspace.subscribe(self._on_workspace_changed)

    @classmethod
    def for_root(cls, root: str | Path, **kwargs: object) -> FileIndexEngine:
        """Engine over a single fixed workspace folder."""
        workspace = WorkspaceRoots([root] if str(root) else [])
        return cls(workspace=workspace, **kwargs)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def get_workspace_root(self) -> str:
        return self._root

    @property
    def snapshot(self) -> Snapshot | None:
        """Current snapshot, possibly stale. For diagnostics."""
        return self._snapshot

    @property
    def state(self) -> SnapshotState:
        if self._build_task is not None and not self._build_task.done():
            return SnapshotState.BUILDING
        if self._snapshot is None:
            return SnapshotState.ABSENT
        return SnapshotState.VALID if self._is_fresh(self._snapshot) else SnapshotState.STALE

    async def search(self, query: str, scope: str = "") -> list[FileEntry]:
        """Browse ``scope`` (empty query) or rank matches for ``query`` under it.

        Always completes with a (possibly empty) ordered list.
        """
        if self._disposed or not self._root:
            return []

        scope = normalize_scope(scope)
        with query_context():
            snapshot = await self._current_snapshot()
            # The workspace may have closed while the build ran
            if snapshot is None or not snapshot.root:
                return []

            if not query:
                return await self._browse(snapshot, scope)

            started = self.clock()
            results = rank_matches(
                snapshot, query, scope, max_results=self.config.search.max_results
            )
            logger.debug(
                "search_completed",
                query=query,
                scope=scope,
                results=len(results),
                duration_ms=round((self.clock() - started) * 1000, 2),
            )
            return results

    async def get_folder_contents(self, folder: str = "") -> FolderContent:
        """Direct children of ``folder`` with display and parent paths."""
        folder = normalize_scope(folder)
        if not self._root:
            return FolderContent(path="", parent_path="", items=[])
        items = await self.search("", folder)
        return FolderContent(path=folder or "/", parent_path=parent_path(folder), items=items)

    def invalidate(self) -> None:
        """Drop the snapshot; the next query rebuilds."""
        self._generation += 1
        self._snapshot = None
        logger.debug("snapshot_invalidated", reason="manual", generation=self._generation)

    async def refresh(self) -> None:
        """Force a rebuild now, regardless of the current state."""
        self.invalidate()
        await self._current_snapshot()

    async def start(self) -> None:
        """Begin watching the workspace for changes."""
        if self._started or self._disposed:
            return
        self._started = True
        await self._start_watcher()

    async def dispose(self) -> None:
        """Stop watching, cancel pending work and drop the snapshot."""
        if self._disposed:
            return
        self._disposed = True

        if self._unsubscribe_workspace is not None:
            self._unsubscribe_workspace()
            self._unsubscribe_workspace = None

        for task in (self._rebuild_task, self._watcher_task, self._build_task):
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._rebuild_task = None
        self._watcher_task = None
        self._build_task = None

        await self._stop_watcher()

        self._generation += 1
        self._snapshot = None
        logger.info("index_engine_disposed", root=self._root or None)

    async def __aenter__(self) -> FileIndexEngine:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.dispose()

    # ------------------------------------------------------------------
    # Snapshot lifecycle
    # ------------------------------------------------------------------

    def _is_fresh(self, snapshot: Snapshot) -> bool:
        if snapshot.generation != self._generation:
            return False
        return self.clock() - snapshot.timestamp < self.config.index.ttl_sec

    async def _current_snapshot(self) -> Snapshot | None:
        """Return a fresh snapshot, building one if needed.

        Returns None when the build failed; callers treat that as no results.
        """
        while True:
            snapshot = self._snapshot
            if snapshot is not None and self._is_fresh(snapshot):
                return snapshot

            task = self._build_task
            if task is None:
                task = self._start_build()
            generation = self._build_generation

            try:
                result = await asyncio.shield(task)
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if task.cancelled() and current is not None and current.cancelling() == 0:
                    return None
                raise

            # Built before the latest invalidation: wait for a newer build
            if generation != self._generation:
                continue
            return result

    def _start_build(self) -> asyncio.Task[Snapshot | None]:
        self.build_count += 1
        self._build_generation = self._generation
        task = asyncio.create_task(self._run_build(self._root, self._generation))
        self._build_task = task
        return task

    async def _run_build(self, root: str, generation: int) -> Snapshot | None:
        try:
            snapshot = await build_snapshot(
                root,
                self.filesystem,
                self._checker,
                max_files=self.config.index.max_files,
                generation=generation,
                clock=self.clock,
            )
        except IndexBuildError as e:
            logger.warning("snapshot_build_failed", root=root, **e.to_dict())
            if generation == self._generation:
                self._snapshot = None
            return None
        finally:
            if self._build_task is asyncio.current_task():
                self._build_task = None

        if generation == self._generation and root == self._root:
            self._snapshot = snapshot
        return snapshot

    async def _browse(self, snapshot: Snapshot, scope: str) -> list[FileEntry]:
        if not needs_fallback(
            snapshot, scope, fallback_on_truncation=self.config.index.fallback_on_truncation
        ):
            return browse(snapshot, scope)
        return await self._list_directly(snapshot.root, scope)

    async def _list_directly(self, root: str, scope: str) -> list[FileEntry]:
        """Uncached listing of one directory for scopes the snapshot can't answer."""
        if not root:
            return []
        if scope and self._checker.is_excluded_rel(scope, is_dir=True):
            return []

        root_path = Path(root)
        target = root_path.joinpath(*scope.split("/")) if scope else root_path
        try:
            inside = target.resolve().is_relative_to(root_path.resolve())
        except (OSError, ValueError) as e:
            logger.debug("browse_scope_unresolvable", scope=scope, error=str(e))
            return []
        if not inside:
            logger.debug("browse_scope_outside_root", scope=scope, root=root)
            return []

        logger.debug("browse_fallback", scope=scope, root=root)
        try:
            children = await self.filesystem.list_directory(target)
        except (OSError, ValueError) as e:
            logger.debug("browse_fallback_failed", scope=scope, error=str(e))
            return []
        return list_directory_entries(root, scope, children, self._checker)

    # ------------------------------------------------------------------
    # Change signals
    # ------------------------------------------------------------------

    def _on_paths_changed(self, paths: list[str]) -> None:
        """Watcher callback: mark the snapshot stale, optionally rebuild early."""
        if self._disposed:
            return
        self._generation += 1
        logger.debug(
            "snapshot_invalidated",
            reason="filesystem_change",
            changed=len(paths),
            generation=self._generation,
        )
        if self.config.watcher.rebuild_on_change:
            self._schedule_rebuild()

    def _schedule_rebuild(self) -> None:
        if self._rebuild_task is not None and not self._rebuild_task.done():
            # The pending rebuild re-checks the generation after each build
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._rebuild_task = loop.create_task(self._rebuild_in_background())

    async def _rebuild_in_background(self) -> None:
        if self._root:
            await self._current_snapshot()

    def _on_workspace_changed(self, root: str) -> None:
        self._root = root
        self._generation += 1
        self._snapshot = None
        if not self._started or self._disposed:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("watcher_restart_skipped", reason="no_running_loop", root=root or None)
            return
        previous = self._watcher_task
        self._watcher_task = loop.create_task(self._restart_watcher(previous))

    async def _restart_watcher(self, previous: asyncio.Task[None] | None) -> None:
        if previous is not None and not previous.done():
            with contextlib.suppress(asyncio.CancelledError):
                await previous
        await self._stop_watcher()
        await self._start_watcher()

    async def _start_watcher(self) -> None:
        if not self.config.watcher.enabled or not self._root:
            return
        subscription = self.filesystem.watch(
            Path(self._root), self._checker, self._on_paths_changed, self.config.watcher
        )
        self._subscription = subscription
        await subscription.start()

    async def _stop_watcher(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.stop()
