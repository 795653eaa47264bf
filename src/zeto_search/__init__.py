"""Embeddable in-process full-text search with BM25 ranking, fuzzy matching and auto-suggest."""

from zeto_search.config import EngineConfig, ObservabilitySettings, SearchOptions, SortOptions, SuggestOptions
from zeto_search.errors import ConfigurationError, SearchFailure, ValidationWarning, ZetoSearchError
from zeto_search.models import IndexStats, SearchDebugInfo, SearchResponse
from zeto_search.engine import ZetoSearch
from zeto_search.search.models import IndexBuildResult


__all__ = [
    "ConfigurationError",
    "EngineConfig",
    "IndexBuildResult",
    "IndexStats",
    "ObservabilitySettings",
    "SearchDebugInfo",
    "SearchFailure",
    "SearchOptions",
    "SearchResponse",
    "SortOptions",
    "SuggestOptions",
    "ValidationWarning",
    "ZetoSearch",
    "ZetoSearchError",
]
