"""Curated search: intent-driven routing between a curated catalog and the web."""

from curated_search.contracts import CatalogItem, CatalogPreview, WebHit
from curated_search.core.bootstrap import build_search_router
from curated_search.observability import (
    LoggingTelemetrySink,
    TelemetryEvent,
    TelemetryService,
    TelemetryStats,
)
from curated_search.orchestrators.search import (
    DEFAULT_PATTERN_LIBRARY,
    CatalogSearch,
    IntentRouter,
    MCPPreferences,
    PatternLibrary,
    QueryIntent,
    RouterSearchResponse,
    SearchResult,
    SearchRouter,
    SearchStrategy,
    WebSearch,
)

__all__ = [
    "DEFAULT_PATTERN_LIBRARY",
    "CatalogItem",
    "CatalogPreview",
    "CatalogSearch",
    "IntentRouter",
    "LoggingTelemetrySink",
    "MCPPreferences",
    "PatternLibrary",
    "QueryIntent",
    "RouterSearchResponse",
    "SearchResult",
    "SearchRouter",
    "SearchStrategy",
    "TelemetryEvent",
    "TelemetryService",
    "TelemetryStats",
    "WebHit",
    "WebSearch",
    "build_search_router",
]
