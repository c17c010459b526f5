"""Backend interfaces consumed by the search router.

Both backends signal failure by raising; the router catches and records it.
Implementations may return contract models or plain mappings with the same
keys.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from curated_search.contracts.backends_v1 import CatalogItem, CatalogPreview, WebHit


class CatalogSearch(ABC):
    """Curated catalog of vetted, pre-indexed content."""

    @abstractmethod
    async def search(self, query: str) -> Sequence[CatalogItem | Mapping[str, Any]]:
        """Return catalog items matching ``query``, best first."""

    @abstractmethod
    async def preview(self, path: str) -> CatalogPreview | Mapping[str, Any]:
        """Return the raw content of the item at ``path``."""


class WebSearch(ABC):
    """General-purpose web search."""

    @abstractmethod
    async def search(
        self, query: str, max_results: int = 5
    ) -> Sequence[WebHit | Mapping[str, Any]]:
        """Return up to ``max_results`` hits for ``query``."""
