"""Shared fixtures for index tests.

``FakeFileSystem`` serves a workspace from an in-memory list of relative file
paths so engine tests control enumeration timing, failures and change
notifications without touching the disk.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from mentionindex.config.models import MentionIndexConfig
from mentionindex.index._internal.filesystem import DirEntry, Enumeration
from mentionindex.index.ops import FileIndexEngine
from mentionindex.index.workspace import WorkspaceRoots

if TYPE_CHECKING:
    from mentionindex.config.models import WatcherConfig
    from mentionindex.index._internal.ignore import IgnoreChecker


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSubscription:
    """Records start/stop and lets tests fire change notifications."""

    def __init__(self, root: Path, on_change: Callable[[list[str]], None]) -> None:
        self.root = root
        self.on_change = on_change
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    def fire(self, *paths: str) -> None:
        self.on_change(list(paths))


class FakeFileSystem:
    """In-memory FileSystem over a flat list of relative file paths."""

    def __init__(self, root: Path, paths: list[str] | None = None) -> None:
        self.root = root
        self.paths: list[str] = list(paths or [])
        self.fail_with: OSError | None = None
        self.gate: asyncio.Event | None = None
        self.enumerations = 0
        self.listed: list[Path] = []
        self.subscriptions: list[FakeSubscription] = []

    async def enumerate_files(
        self,
        root: Path,  # noqa: ARG002
        checker: IgnoreChecker,
        max_files: int,
    ) -> Enumeration:
        self.enumerations += 1
        # Contents are read when the walk starts, not when it finishes
        paths = list(self.paths)
        failure = self.fail_with
        if self.gate is not None:
            await self.gate.wait()
        if failure is not None:
            raise failure
        kept = [p for p in paths if not checker.is_excluded_rel(p)]
        return Enumeration(paths=kept[:max_files], truncated=len(kept) > max_files)

    async def list_directory(self, path: Path) -> list[DirEntry]:
        self.listed.append(path)
        rel = path.relative_to(self.root).as_posix()
        rel = "" if rel == "." else rel
        prefix = f"{rel}/" if rel else ""
        children: dict[str, bool] = {}
        for p in self.paths:
            if not p.startswith(prefix):
                continue
            name, sep, _rest = p[len(prefix) :].partition("/")
            children[name] = children.get(name, False) or bool(sep)
        if not children:
            raise FileNotFoundError(str(path))
        return [DirEntry(name=name, is_dir=is_dir) for name, is_dir in children.items()]

    def watch(
        self,
        root: Path,
        checker: IgnoreChecker,  # noqa: ARG002
        on_change: Callable[[list[str]], None],
        config: WatcherConfig,  # noqa: ARG002
    ) -> FakeSubscription:
        subscription = FakeSubscription(root, on_change)
        self.subscriptions.append(subscription)
        return subscription


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def fake_fs(workspace_dir: Path) -> FakeFileSystem:
    return FakeFileSystem(workspace_dir, ["src/a.ts", "src/sub/b.ts", "readme.md"])


@pytest.fixture
def make_engine(
    workspace_dir: Path, fake_fs: FakeFileSystem, clock: FakeClock
) -> Callable[..., FileIndexEngine]:
    """Factory for engines over the fake filesystem, watcher disabled by default."""

    def _make(
        *,
        workspace: WorkspaceRoots | None = None,
        **sections: dict[str, object],
    ) -> FileIndexEngine:
        overrides: dict[str, dict[str, object]] = {"watcher": {"enabled": False}}
        for name, values in sections.items():
            overrides[name] = {**overrides.get(name, {}), **values}
        config = MentionIndexConfig.model_validate(overrides)
        return FileIndexEngine(
            workspace=workspace if workspace is not None else WorkspaceRoots([workspace_dir]),
            filesystem=fake_fs,
            config=config,
            clock=clock,
        )

    return _make
