"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
For configurable values, see models.py (IndexConfig, SearchConfig, etc.).
"""

# =============================================================================
# Query Maximums
# =============================================================================
# Hard caps for UI stability. Users can configure defaults below these, but
# cannot exceed them.

SEARCH_MAX_RESULTS = 50
"""Maximum results returned by a ranked substring search."""

MAX_FILES_LIMIT = 500_000
"""Upper bound for index.max_files."""

# =============================================================================
# Freshness
# =============================================================================

TTL_MIN_SEC = 0.0
"""Lowest accepted snapshot TTL. Zero rebuilds on every query."""

# =============================================================================
# Paths
# =============================================================================

CONFIG_DIR_NAME = ".mentionindex"
"""Per-workspace config directory, never indexed."""

CONFIG_FILE_NAME = "config.yaml"
