"""Tests for config/models.py validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mentionindex.config.constants import MAX_FILES_LIMIT, SEARCH_MAX_RESULTS
from mentionindex.config.models import (
    IndexConfig,
    LogOutputConfig,
    MentionIndexConfig,
    SearchConfig,
    WatcherConfig,
)
from mentionindex.core.excludes import DEFAULT_EXCLUDE_PATTERNS


class TestDefaults:
    """Built-in defaults."""

    def test_index_defaults(self) -> None:
        """Snapshot TTL, file cap and exclusions have sensible defaults."""
        config = IndexConfig()
        assert config.ttl_sec == 5.0
        assert config.max_files == 20_000
        assert config.exclude_patterns == list(DEFAULT_EXCLUDE_PATTERNS)
        assert config.fallback_on_truncation is True

    def test_search_default_is_hard_cap(self) -> None:
        """Default result count equals the hard maximum."""
        assert SearchConfig().max_results == SEARCH_MAX_RESULTS

    def test_watcher_defaults(self) -> None:
        """Watcher is on and rebuilds eagerly by default."""
        config = WatcherConfig()
        assert config.enabled
        assert config.rebuild_on_change
        assert config.debounce_sec < config.max_debounce_sec

    def test_root_config_has_all_sections(self) -> None:
        """Root config nests every section."""
        config = MentionIndexConfig()
        assert config.logging.level == "INFO"
        assert isinstance(config.index, IndexConfig)
        assert isinstance(config.search, SearchConfig)
        assert isinstance(config.watcher, WatcherConfig)


class TestValidation:
    """Field validators."""

    def test_negative_ttl_rejected(self) -> None:
        """TTL can't be negative."""
        with pytest.raises(ValidationError):
            IndexConfig(ttl_sec=-1)

    def test_zero_ttl_allowed(self) -> None:
        """Zero TTL means rebuild on every query."""
        assert IndexConfig(ttl_sec=0).ttl_sec == 0

    @pytest.mark.parametrize("value", [0, MAX_FILES_LIMIT + 1])
    def test_max_files_out_of_range_rejected(self, value: int) -> None:
        """File cap must be within 1..MAX_FILES_LIMIT."""
        with pytest.raises(ValidationError):
            IndexConfig(max_files=value)

    @pytest.mark.parametrize("value", [0, SEARCH_MAX_RESULTS + 1])
    def test_max_results_out_of_range_rejected(self, value: int) -> None:
        """Result count can't exceed the hard cap."""
        with pytest.raises(ValidationError):
            SearchConfig(max_results=value)

    def test_relative_log_destination_rejected(self) -> None:
        """File log destinations must be absolute."""
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/out.log")


class TestExcludePatterns:
    """Exclude pattern composition."""

    def test_extra_patterns_appended(self) -> None:
        """extra_exclude_patterns extend the base list."""
        config = IndexConfig(exclude_patterns=["dist/"], extra_exclude_patterns=["*.log"])
        assert config.all_exclude_patterns == ["dist/", "*.log"]

    def test_default_list_not_shared(self) -> None:
        """Each config gets its own copy of the default list."""
        first = IndexConfig()
        first.exclude_patterns.append("custom/")
        assert "custom/" not in IndexConfig().exclude_patterns
