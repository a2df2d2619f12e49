"""Tests for IgnoreChecker exclusion rules."""

from __future__ import annotations

import pytest

from mentionindex.index._internal.ignore import IgnoreChecker


class TestDefaults:
    """Default pattern behavior."""

    @pytest.mark.parametrize(
        "rel_dir", [".git", "node_modules", "pkg/node_modules", "dist", "foo.egg-info"]
    )
    def test_default_dirs_pruned(self, rel_dir: str) -> None:
        """Dependency, build and VCS directories are pruned at any depth."""
        assert IgnoreChecker().should_prune_dir(rel_dir)

    @pytest.mark.parametrize("rel_dir", ["src", "docs", "lib/distutils", "output"])
    def test_regular_dirs_kept(self, rel_dir: str) -> None:
        """Names merely resembling excluded ones are kept."""
        assert not IgnoreChecker().should_prune_dir(rel_dir)

    @pytest.mark.parametrize("rel_path", ["app.min.js", "static/site.min.css", "a.js.map"])
    def test_generated_files_ignored(self, rel_path: str) -> None:
        """Minified bundles and source maps are ignored."""
        assert IgnoreChecker().should_ignore_file(rel_path)

    def test_regular_file_kept(self) -> None:
        """Ordinary source files are indexed."""
        assert not IgnoreChecker().should_ignore_file("src/app.js")


class TestCustomPatterns:
    """Configured pattern lists."""

    def test_hardcoded_dirs_cannot_be_negated(self) -> None:
        """VCS directories stay pruned even with an empty or negating list."""
        checker = IgnoreChecker(["!.git/"])
        assert checker.should_prune_dir(".git")
        assert checker.should_prune_dir("sub/.hg")

    def test_empty_list_disables_defaults(self) -> None:
        """Replacing the list drops the default exclusions."""
        checker = IgnoreChecker([])
        assert not checker.should_prune_dir("node_modules")
        assert not checker.should_ignore_file("app.min.js")

    def test_negation_reincludes(self) -> None:
        """'!pattern' opts a path back in."""
        checker = IgnoreChecker(["build/", "!tools/build/", "*.log", "!keep.log"])
        assert checker.should_prune_dir("build")
        assert not checker.should_prune_dir("tools/build")
        assert checker.should_ignore_file("debug.log")
        assert not checker.should_ignore_file("logs/keep.log")

    def test_path_patterns_anchor_to_root(self) -> None:
        """Patterns with '/' match the whole relative path."""
        checker = IgnoreChecker(["docs/generated/", "/notes/*.txt"])
        assert checker.should_prune_dir("docs/generated")
        assert not checker.should_prune_dir("other/docs/generated")
        assert checker.should_ignore_file("notes/todo.txt")
        assert not checker.should_ignore_file("todo.txt")

    def test_comments_and_blanks_skipped(self) -> None:
        """Blank lines and '#' comments are not patterns."""
        checker = IgnoreChecker(["", "  ", "# node_modules/"])
        assert not checker.should_prune_dir("node_modules")


class TestIsExcludedRel:
    """Full-path checks including ancestors."""

    def test_file_under_pruned_dir(self) -> None:
        """A file inside an excluded directory is excluded."""
        checker = IgnoreChecker()
        assert checker.is_excluded_rel("node_modules/lib/index.js")
        assert checker.is_excluded_rel("a/.git/config")

    def test_directory_check(self) -> None:
        """is_dir switches to directory rules for the leaf."""
        checker = IgnoreChecker()
        assert checker.is_excluded_rel("pkg/dist", is_dir=True)
        assert not checker.is_excluded_rel("pkg/dist")

    def test_root_never_excluded(self) -> None:
        """The empty path is the root."""
        assert not IgnoreChecker().is_excluded_rel("")

    def test_backslashes_normalized(self) -> None:
        """Windows separators are accepted."""
        assert IgnoreChecker().is_excluded_rel("node_modules\\x.js")
