"""Orchestrators: multi-step routing pipelines (e.g. curated search)."""

from curated_search.orchestrators.search import (
    CatalogSearch,
    IntentRouter,
    SearchRouter,
    WebSearch,
)

__all__ = [
    "CatalogSearch",
    "IntentRouter",
    "SearchRouter",
    "WebSearch",
]
