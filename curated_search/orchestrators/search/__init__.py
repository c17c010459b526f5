"""Curated search routing: intent analysis, sequential orchestration, ranking."""

from curated_search.orchestrators.search.intent_router import IntentRouter
from curated_search.orchestrators.search.interface import CatalogSearch, WebSearch
from curated_search.orchestrators.search.models import (
    MCPPreferences,
    QueryIntent,
    RouterSearchResponse,
    SearchResult,
    SearchStrategy,
)
from curated_search.orchestrators.search.orchestrator import SearchRouter
from curated_search.orchestrators.search.patterns import (
    DEFAULT_PATTERN_LIBRARY,
    PatternLibrary,
)

__all__ = [
    "DEFAULT_PATTERN_LIBRARY",
    "CatalogSearch",
    "IntentRouter",
    "MCPPreferences",
    "PatternLibrary",
    "QueryIntent",
    "RouterSearchResponse",
    "SearchResult",
    "SearchRouter",
    "SearchStrategy",
    "WebSearch",
]
