"""Web search backend (SearXNG JSON API). Returns WebHit."""

import httpx

from curated_search.contracts.backends_v1 import WebHit
from curated_search.core.config import config
from curated_search.orchestrators.search.interface import WebSearch


class SearxngWebSearch(WebSearch):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        language: str = "en-US",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        search_url = base_url if base_url is not None else config.searxng_url
        self._base_url = search_url.rstrip("/") if search_url else ""
        if self._base_url and not self._base_url.endswith("/search"):
            self._base_url = self._base_url + "/search"
        self._timeout = timeout or config.web_search_timeout
        self._language = language
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return self._base_url

    async def search(self, query: str, max_results: int = 5) -> list[WebHit]:
        if not self._base_url or not query.strip():
            return []

        params = {"q": query, "format": "json", "language": self._language}
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.get(
                self._base_url,
                params=params,
                follow_redirects=True,
            )
            response.raise_for_status()
            data = response.json()

        hits: list[WebHit] = []
        for item in data.get("results", [])[:max_results]:
            hits.append(
                WebHit(
                    title=item.get("title") or "No Title",
                    url=item.get("url") or "#",
                    summary=item.get("content") or item.get("snippet") or "",
                )
            )
        return hits
