"""Word-overlap relevance scoring for catalog and web results.

Scores are heuristics in [0, 1], not a learned ranking.
"""

from curated_search.contracts.backends_v1 import CatalogItem, CatalogItemKind, WebHit

# Kind boost for curated items: instructions are the most vetted content.
CATALOG_KIND_BOOST: dict[str, float] = {
    CatalogItemKind.INSTRUCTION: 0.1,
    CatalogItemKind.PROMPT: 0.05,
}

CATALOG_TITLE_WEIGHT = 0.6
CATALOG_PATH_WEIGHT = 0.4
CATALOG_SCORE_CAP = 0.95

WEB_TITLE_WEIGHT = 0.7
WEB_SUMMARY_WEIGHT = 0.3
WEB_SCORE_CAP = 0.9


def string_match(text: str, query: str) -> float:
    """Fraction of query words (longer than 2 chars) found as substrings of text."""
    words = [w for w in (query or "").lower().split() if len(w) > 2]
    if not words:
        return 0.0
    haystack = (text or "").lower()
    return sum(1 for w in words if w in haystack) / len(words)


def catalog_relevance(item: CatalogItem, query: str) -> float:
    title_score = string_match(item.title, query)
    path_score = string_match(item.path, query)
    boost = CATALOG_KIND_BOOST.get(item.kind or "", 0.0)
    return min(
        CATALOG_SCORE_CAP,
        title_score * CATALOG_TITLE_WEIGHT + path_score * CATALOG_PATH_WEIGHT + boost,
    )


def web_relevance(hit: WebHit, query: str) -> float:
    title_score = string_match(hit.title, query)
    summary_score = string_match(hit.summary, query)
    return min(
        WEB_SCORE_CAP,
        title_score * WEB_TITLE_WEIGHT + summary_score * WEB_SUMMARY_WEIGHT,
    )


def truncate_content(content: str, max_length: int) -> str:
    if len(content) <= max_length:
        return content
    return content[: max(0, max_length - 3)] + "..."
