"""In-memory curated catalog backend.

Keyword search over already-indexed items. Indexing and fetching the
catalog from its remote home is the caller's job; this backend only serves
what it was given.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from curated_search.contracts.backends_v1 import CatalogItem, CatalogPreview
from curated_search.orchestrators.search.interface import CatalogSearch


def _tokenize(text: str) -> list[str]:
    return re.findall(r"[a-z0-9#+]+", (text or "").lower())


class InMemoryCatalogSearch(CatalogSearch):
    """Ranks items by how many query words hit their title, path or description."""

    def __init__(
        self,
        items: Iterable[CatalogItem | Mapping[str, Any]] = (),
        contents: Mapping[str, str] | None = None,
    ):
        self._items: dict[str, CatalogItem] = {}
        self._contents: dict[str, str] = dict(contents or {})
        for item in items:
            self.add(item)

    def add(self, item: CatalogItem | Mapping[str, Any], content: str | None = None) -> CatalogItem:
        model = item if isinstance(item, CatalogItem) else CatalogItem.model_validate(item)
        self._items[model.path] = model
        if content is not None:
            self._contents[model.path] = content
        return model

    def __len__(self) -> int:
        return len(self._items)

    async def search(self, query: str) -> list[CatalogItem]:
        words = [w for w in _tokenize(query) if len(w) > 2]
        if not words:
            return []

        scored: list[tuple[int, int, CatalogItem]] = []
        for order, item in enumerate(self._items.values()):
            haystack = f"{item.title} {item.path} {item.description}".lower()
            hits = sum(1 for w in words if w in haystack)
            if hits:
                scored.append((hits, order, item))
        scored.sort(key=lambda x: (-x[0], x[1]))
        return [item for _, _, item in scored]

    async def preview(self, path: str) -> CatalogPreview:
        item = self._items.get(path)
        if item is None:
            raise KeyError(f"Item not found in catalog: {path}")
        content = self._contents.get(path)
        if content is None:
            raise KeyError(f"No content indexed for: {path}")
        return CatalogPreview(title=item.title, content=content, raw_url=item.raw_url)
