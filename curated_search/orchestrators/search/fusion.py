"""Result merging: source-aware ordering and rule-based recommendations."""

import logging
from collections import Counter

from curated_search.contracts.backends_v1 import CatalogItemKind
from curated_search.orchestrators.search.constants import IntentType, ResultSource
from curated_search.orchestrators.search.models import QueryIntent, SearchResult

logger = logging.getLogger(__name__)


def sort_results(results: list[SearchResult], mcp_first: bool) -> list[SearchResult]:
    """Order merged results.

    With ``mcp_first`` every catalog result precedes every web result.
    Within a source, results are ordered by descending relevance; ties keep
    their arrival order.
    """

    def key(r: SearchResult) -> tuple[int, float]:
        tier = 0 if (not mcp_first or r.source == ResultSource.CATALOG) else 1
        return tier, -r.relevance_score

    ranked = sorted(results, key=key)
    logger.debug(
        "Fusion: %s results ranked | mcp_first=%s", len(ranked), mcp_first
    )
    return ranked


def generate_recommendations(
    results: list[SearchResult], intent: QueryIntent
) -> list[str]:
    """Every rule that applies contributes one recommendation."""
    recommendations: list[str] = []
    catalog = [r for r in results if r.source == ResultSource.CATALOG]
    web = [r for r in results if r.source == ResultSource.WEB]
    kinds = Counter(r.type for r in catalog)

    if kinds[CatalogItemKind.INSTRUCTION]:
        recommendations.append(
            f"Found {kinds[CatalogItemKind.INSTRUCTION]} curated instruction(s) - "
            "these contain community-vetted best practices"
        )
    if kinds[CatalogItemKind.PROMPT]:
        recommendations.append(
            f"Found {kinds[CatalogItemKind.PROMPT]} specialized prompt(s) for your specific use case"
        )
    if intent.intent_type == IntentType.BEST_PRACTICES and not catalog:
        recommendations.append(
            "No curated best practices found - consider contributing your solution to the community"
        )
    if catalog and web:
        recommendations.append(
            "Consider reviewing both curated community practices and latest web resources"
        )
    return recommendations
