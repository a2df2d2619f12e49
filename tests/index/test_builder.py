"""Tests for snapshot construction.

Covers:
- assemble_snapshot() structure and invariants
- build_snapshot() against the local filesystem
- Enumeration failures mapped to IndexBuildError
- walk_tree() pruning, ordering and error modes
"""

from __future__ import annotations

from pathlib import Path

import pytest

from mentionindex.core.errors import ErrorCode, IndexBuildError
from mentionindex.core.icons import DEFAULT_FILE_ICON
from mentionindex.index._internal.builder import assemble_snapshot, build_snapshot, make_file_entry
from mentionindex.index._internal.filesystem import Enumeration, LocalFileSystem, walk_tree
from mentionindex.index._internal.ignore import IgnoreChecker
from mentionindex.index.models import ROOT, EntryKind, Snapshot

SCENARIO = ["src/a.ts", "src/sub/b.ts", "readme.md"]


def _ancestors(relative_path: str) -> list[str]:
    parts = relative_path.split("/")[:-1]
    return [""] + ["/".join(parts[: i + 1]) for i in range(len(parts))]


class TestAssembleSnapshot:
    """Tests for the pure snapshot assembly step."""

    def test_every_ancestor_is_indexed(self) -> None:
        """Every ancestor directory of every file is a directory_index key."""
        paths = ["a/b/c/d.txt", "a/x.txt", "e/f/g.md", "top.txt"]
        snapshot = assemble_snapshot("/ws", paths)

        for path in paths:
            for ancestor in _ancestors(path):
                assert ancestor in snapshot.directory_index, ancestor

    def test_intermediate_directories_map_to_empty(self) -> None:
        """Directories holding only subdirectories have no direct files."""
        snapshot = assemble_snapshot("/ws", SCENARIO)

        assert snapshot.directory_index["src/sub"][0].name == "b.ts"
        assert [e.name for e in snapshot.directory_index["src"]] == ["a.ts"]
        assert [e.name for e in snapshot.directory_index[ROOT]] == ["readme.md"]

    def test_files_sorted_and_deduplicated(self) -> None:
        """Files are ordered by relative path and listed once."""
        snapshot = assemble_snapshot("/ws", ["b.txt", "a.txt", "b.txt", "/c.txt"])

        assert [e.relative_path for e in snapshot.files] == ["a.txt", "b.txt", "c.txt"]
        assert len(snapshot) == 3

    def test_subdirectories_derived_from_keys(self) -> None:
        """Immediate child directories are sorted case-insensitively."""
        snapshot = assemble_snapshot("/ws", ["Zeta/a", "alpha/b", "Beta/c/d"])

        assert snapshot.subdirectories[ROOT] == ("alpha", "Beta", "Zeta")
        assert snapshot.subdirectories["Beta"] == ("c",)

    def test_file_path_never_synthesized_as_folder(self) -> None:
        """A path that is a file is not also a subdirectory."""
        snapshot = assemble_snapshot("/ws", ["docs", "docs/guide.md"])

        assert "docs" in snapshot.file_paths
        assert "docs" not in snapshot.subdirectories.get(ROOT, ())

    def test_entries_carry_kind_icon_and_paths(self) -> None:
        """File entries are complete and absolute paths join the root."""
        entry = make_file_entry("/ws", "src/sub/b.ts")

        assert entry.kind is EntryKind.FILE
        assert entry.name == "b.ts"
        assert entry.relative_path == "src/sub/b.ts"
        assert Path(entry.full_path) == Path("/ws/src/sub/b.ts")
        assert entry.icon != DEFAULT_FILE_ICON

    def test_snapshot_is_read_only(self) -> None:
        """directory_index can't be mutated by readers."""
        snapshot = assemble_snapshot("/ws", SCENARIO)

        with pytest.raises(TypeError):
            snapshot.directory_index["new"] = ()  # type: ignore[index]

    def test_metadata_recorded(self) -> None:
        """Truncation, generation and timestamp pass through."""
        snapshot = assemble_snapshot("/ws", [], truncated=True, generation=7, timestamp=12.5)

        assert snapshot.truncated
        assert snapshot.generation == 7
        assert snapshot.timestamp == 12.5
        assert dict(snapshot.directory_index) == {ROOT: ()}


class TestEmptySnapshot:
    """Tests for Snapshot.empty()."""

    def test_no_workspace(self) -> None:
        """The no-workspace snapshot has no directories at all."""
        snapshot = Snapshot.empty("")
        assert len(snapshot) == 0
        assert dict(snapshot.directory_index) == {}

    def test_empty_workspace_has_root(self) -> None:
        """An empty workspace still indexes its root."""
        snapshot = Snapshot.empty("/ws")
        assert ROOT in snapshot.directory_index


class TestBuildSnapshot:
    """Tests for build_snapshot against real directories."""

    @pytest.fixture
    def workspace(self, tmp_path: Path) -> Path:
        (tmp_path / "src" / "sub").mkdir(parents=True)
        (tmp_path / "src" / "a.ts").write_text("")
        (tmp_path / "src" / "sub" / "b.ts").write_text("")
        (tmp_path / "readme.md").write_text("")
        (tmp_path / "node_modules" / "lib").mkdir(parents=True)
        (tmp_path / "node_modules" / "lib" / "index.js").write_text("")
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "HEAD").write_text("")
        (tmp_path / "app.min.js").write_text("")
        return tmp_path

    @pytest.mark.asyncio
    async def test_walks_and_excludes(self, workspace: Path) -> None:
        """Excluded directories and files never reach the snapshot."""
        snapshot = await build_snapshot(
            str(workspace), LocalFileSystem(), IgnoreChecker(), max_files=100
        )

        assert sorted(snapshot.file_paths) == ["readme.md", "src/a.ts", "src/sub/b.ts"]
        assert not snapshot.truncated

    @pytest.mark.asyncio
    async def test_cap_truncates(self, workspace: Path) -> None:
        """Reaching max_files stops enumeration and marks truncation."""
        snapshot = await build_snapshot(
            str(workspace), LocalFileSystem(), IgnoreChecker(), max_files=2
        )

        assert len(snapshot.files) == 2
        assert snapshot.truncated

    @pytest.mark.asyncio
    async def test_generation_and_clock(self, workspace: Path) -> None:
        """The snapshot records its generation and the build start time."""
        snapshot = await build_snapshot(
            str(workspace),
            LocalFileSystem(),
            IgnoreChecker(),
            max_files=100,
            generation=3,
            clock=lambda: 42.0,
        )

        assert snapshot.generation == 3
        assert snapshot.timestamp == 42.0

    @pytest.mark.asyncio
    async def test_empty_root_skips_filesystem(self) -> None:
        """No root means an empty snapshot, no enumeration."""
        snapshot = await build_snapshot("", LocalFileSystem(), IgnoreChecker(), max_files=10)

        assert len(snapshot) == 0
        assert snapshot.root == ""

    @pytest.mark.asyncio
    async def test_missing_root_raises(self, tmp_path: Path) -> None:
        """A root that doesn't exist is INDEX_ROOT_MISSING."""
        with pytest.raises(IndexBuildError) as exc_info:
            await build_snapshot(
                str(tmp_path / "gone"), LocalFileSystem(), IgnoreChecker(), max_files=10
            )
        assert exc_info.value.code == ErrorCode.INDEX_ROOT_MISSING

    @pytest.mark.asyncio
    async def test_enumeration_error_raises(self, tmp_path: Path) -> None:
        """Other OSErrors become INDEX_ENUMERATION_FAILED."""

        class BrokenFileSystem(LocalFileSystem):
            async def enumerate_files(
                self, root: Path, checker: IgnoreChecker, max_files: int
            ) -> Enumeration:
                raise PermissionError(13, "Permission denied", str(root))

        with pytest.raises(IndexBuildError) as exc_info:
            await build_snapshot(str(tmp_path), BrokenFileSystem(), IgnoreChecker(), max_files=10)
        assert exc_info.value.code == ErrorCode.INDEX_ENUMERATION_FAILED
        assert exc_info.value.retryable


class TestWalkTree:
    """Tests for the shared pruned walk."""

    def test_prunes_and_sorts(self, tmp_path: Path) -> None:
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "z.md").write_text("")
        (tmp_path / "c.md").write_text("")

        [top, *rest] = list(walk_tree(tmp_path, IgnoreChecker()))

        assert top == ("", ["a", "b"], ["c.md", "z.md"])
        assert [rel_dir for rel_dir, _, _ in rest] == ["a", "b"]

    def test_strict_walk_raises_for_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            list(walk_tree(tmp_path / "gone", IgnoreChecker()))

    def test_lenient_walk_skips_missing_root(self, tmp_path: Path) -> None:
        assert list(walk_tree(tmp_path / "gone", IgnoreChecker(), strict=False)) == []
