"""Versioned payload contracts shared with search backends."""

from curated_search.contracts.backends_v1 import (
    CatalogItem,
    CatalogItemKind,
    CatalogPreview,
    WebHit,
)

__all__ = ["CatalogItem", "CatalogItemKind", "CatalogPreview", "WebHit"]
