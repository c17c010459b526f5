"""Search router: curated-first routing with web fallback.

Pipeline:
  1. Intent analysis + step planning (deterministic, pattern-driven)
  2. Sequential step execution (catalog / web), early exit and fallback skip
  3. Relevance scoring per result, content preview for strong catalog hits
  4. Source-aware ordering and rule-based recommendations
  5. Telemetry at every consultation, outcome and completion

Steps run strictly in order because each step's outcome decides whether
the next one runs at all.
"""

import time
from collections.abc import Mapping
from typing import Any, TypeVar

from curated_search.contracts.backends_v1 import CatalogItem, CatalogPreview, WebHit
from curated_search.core.logger import logger
from curated_search.observability import TelemetryService, traceable
from curated_search.observability.telemetry import TelemetryEvent, TelemetryStats
from curated_search.orchestrators.search.constants import (
    SUFFICIENT_RESULTS,
    WEB_RESULT_TYPE,
    ResultSource,
    StepPriority,
    StepType,
)
from curated_search.orchestrators.search.fusion import (
    generate_recommendations,
    sort_results,
)
from curated_search.orchestrators.search.intent_router import IntentRouter
from curated_search.orchestrators.search.interface import CatalogSearch, WebSearch
from curated_search.orchestrators.search.models import (
    MCPPreferences,
    QueryIntent,
    RouterSearchResponse,
    SearchPathStep,
    SearchResult,
    SearchStep,
    SearchStrategy,
)
from curated_search.orchestrators.search.scoring import (
    catalog_relevance,
    truncate_content,
    web_relevance,
)


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 1)


T = TypeVar("T", CatalogItem, CatalogPreview, WebHit)


def _coerce(
    model: type[T], raw: T | Mapping[str, Any]
) -> T:
    if isinstance(raw, model):
        return raw
    return model.model_validate(raw)


def _step_source(step: SearchStep) -> ResultSource:
    if step.type == StepType.CATALOG_SEARCH:
        return ResultSource.CATALOG
    return ResultSource.WEB


class SearchRouter:
    """Executes search strategies against a curated catalog and the web."""

    def __init__(
        self,
        catalog: CatalogSearch,
        web: WebSearch,
        telemetry: TelemetryService,
        preferences: MCPPreferences | dict[str, Any] | None = None,
        intent_router: IntentRouter | None = None,
        max_catalog_results: int = 5,
        max_web_results: int = 5,
        preview_threshold: float = 0.7,
        preview_max_chars: int = 500,
    ):
        self._catalog = catalog
        self._web = web
        self._telemetry = telemetry
        self._intent_router = intent_router if intent_router is not None else IntentRouter()
        self._preferences = MCPPreferences().merged(preferences)
        self._max_catalog_results = max(1, max_catalog_results)
        self._max_web_results = max(1, max_web_results)
        self._preview_threshold = preview_threshold
        self._preview_max_chars = preview_max_chars

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def update_preferences(self, partial: MCPPreferences | dict[str, Any]) -> None:
        """Merge ``partial`` into the live preferences (whole-object swap)."""
        self._preferences = self._preferences.merged(partial)
        logger.info("Router preferences updated: %s", self._preferences.model_dump())

    def get_preferences(self) -> MCPPreferences:
        return self._preferences.model_copy()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def analyze_intent(
        self, query: str, preferences: MCPPreferences | dict[str, Any] | None = None
    ) -> QueryIntent:
        return self._intent_router.analyze_intent(
            query, self._preferences.merged(preferences)
        )

    def create_search_strategy(
        self, query: str, preferences: MCPPreferences | dict[str, Any] | None = None
    ) -> SearchStrategy:
        return self._intent_router.create_search_strategy(
            query, self._preferences.merged(preferences)
        )

    # ------------------------------------------------------------------
    # Telemetry passthrough
    # ------------------------------------------------------------------

    @property
    def telemetry(self) -> TelemetryService:
        return self._telemetry

    def get_stats(self) -> TelemetryStats:
        return self._telemetry.get_stats()

    def get_recent_events(self, limit: int = 50) -> list[TelemetryEvent]:
        return self._telemetry.get_recent_events(limit)

    def set_telemetry_enabled(self, enabled: bool) -> None:
        self._telemetry.set_enabled(enabled)

    def clear_telemetry(self) -> None:
        self._telemetry.clear_data()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    @traceable(name="curated_search", run_type="chain")
    async def search(self, query: str) -> RouterSearchResponse:
        """Run the full routing pipeline. Backend failures never propagate."""
        pipeline_start = time.monotonic()
        prefs = self._preferences
        strategy = self._intent_router.create_search_strategy(query, prefs)
        intent_meta: dict[str, Any] = {
            "intent": str(strategy.intent.intent_type),
            "confidence": strategy.intent.confidence,
        }
        logger.info(
            "Strategy: %s | steps=%s",
            strategy.explanation,
            [f"{s.type}:{s.priority}" for s in strategy.steps],
        )
        self._telemetry.track_mcp_consultation(query, 0, intent_meta)

        results: list[SearchResult] = []
        search_path: list[SearchPathStep] = []
        sources_used: list[str] = []
        skipped = 0

        for step in strategy.steps:
            source = _step_source(step)

            if step.priority == StepPriority.FALLBACK and len(results) >= SUFFICIENT_RESULTS:
                search_path.append(
                    SearchPathStep(
                        action=f"Skipped {source} fallback - sufficient results found",
                        source=source,
                        query=step.query,
                        result_count=0,
                        duration=0,
                        success=True,
                    )
                )
                logger.info(
                    "Skipping %s fallback: %s results already collected",
                    source,
                    len(results),
                )
                skipped += 1
                continue

            sources_used.append(source)
            start = time.monotonic()
            try:
                if step.type == StepType.CATALOG_SEARCH:
                    step_results = await self._catalog_step(step, intent_meta, start)
                else:
                    step_results = await self._web_step(step, results, intent_meta, start)
            except Exception as e:
                duration = _elapsed_ms(start)
                logger.warning("%s step failed for %r: %s", step.type, step.query, e)
                self._track_failure(step, duration, e, results, intent_meta)
                search_path.append(
                    SearchPathStep(
                        action=f"Failed {step.type}",
                        source=source,
                        query=step.query,
                        result_count=0,
                        duration=duration,
                        success=False,
                    )
                )
                continue

            results.extend(step_results)
            search_path.append(
                SearchPathStep(
                    action=f"{'Catalog' if source == ResultSource.CATALOG else 'Web'} search completed",
                    source=source,
                    query=step.query,
                    result_count=len(step_results),
                    duration=_elapsed_ms(start),
                    success=True,
                )
            )

            if (
                step.type == StepType.CATALOG_SEARCH
                and step.priority == StepPriority.HIGH
                and step_results
                and not prefs.fallback_to_web
            ):
                logger.debug("Catalog answered with %s results; stopping", len(step_results))
                break

        ranked = sort_results(results, mcp_first=prefs.mcp_first)
        recommendations = generate_recommendations(ranked, strategy.intent)

        catalog_count = sum(1 for r in ranked if r.source == ResultSource.CATALOG)
        total_ms = _elapsed_ms(pipeline_start)
        self._telemetry.track_search_completed(
            query,
            len(ranked),
            total_ms,
            sources_used,
            {
                **intent_meta,
                "catalog_result_count": catalog_count,
                "web_result_count": len(ranked) - catalog_count,
                "failed_steps": sum(1 for p in search_path if not p.success),
                "skipped_steps": skipped,
                "trace": [p.action for p in search_path],
            },
        )
        logger.info(
            "Search complete: %s results | catalog=%s | web=%s | path=%s | total=%.0fms",
            len(ranked),
            catalog_count,
            len(ranked) - catalog_count,
            [p.action for p in search_path],
            total_ms,
        )

        return RouterSearchResponse(
            results=ranked,
            strategy=strategy,
            search_path=search_path,
            recommendations=recommendations,
        )

    async def _catalog_step(
        self, step: SearchStep, intent_meta: dict[str, Any], start: float
    ) -> list[SearchResult]:
        raw_items = await self._catalog.search(step.query)
        items = [_coerce(CatalogItem, raw) for raw in list(raw_items)[: self._max_catalog_results]]

        results: list[SearchResult] = []
        for item in items:
            score = catalog_relevance(item, step.query)
            content = None
            if score > self._preview_threshold:
                content = await self._fetch_preview(item)
            results.append(
                SearchResult(
                    source=ResultSource.CATALOG,
                    title=item.title,
                    content=content,
                    url=item.raw_url,
                    relevance_score=score,
                    type=item.kind,
                )
            )

        duration = _elapsed_ms(start)
        if results:
            self._telemetry.track_mcp_resources_found(
                step.query,
                len(results),
                duration,
                list(dict.fromkeys(r.type for r in results if r.type)),
                {
                    **intent_meta,
                    "average_relevance": round(
                        sum(r.relevance_score for r in results) / len(results), 3
                    ),
                },
            )
        else:
            self._telemetry.track_mcp_resources_not_found(
                step.query,
                duration,
                "No matching curated content found in catalog",
                intent_meta,
            )
        return results

    async def _fetch_preview(self, item: CatalogItem) -> str | None:
        try:
            preview = _coerce(CatalogPreview, await self._catalog.preview(item.path))
        except Exception as e:
            logger.debug("Preview failed for %s: %s", item.path, e)
            return None
        return truncate_content(preview.content, self._preview_max_chars)

    async def _web_step(
        self,
        step: SearchStep,
        accumulated: list[SearchResult],
        intent_meta: dict[str, Any],
        start: float,
    ) -> list[SearchResult]:
        hits = await self._web.search(step.query, self._max_web_results)
        results = []
        for raw in list(hits)[: self._max_web_results]:
            hit = _coerce(WebHit, raw)
            results.append(
                SearchResult(
                    source=ResultSource.WEB,
                    title=hit.title,
                    content=hit.summary,
                    url=hit.url,
                    relevance_score=web_relevance(hit, step.query),
                    type=WEB_RESULT_TYPE,
                )
            )

        self._telemetry.track_fallback_to_web(
            step.query,
            sum(1 for r in accumulated if r.source == ResultSource.CATALOG),
            _elapsed_ms(start),
            self._web_reason(step),
            intent_meta,
        )
        return results

    @staticmethod
    def _web_reason(step: SearchStep) -> str:
        if step.priority == StepPriority.FALLBACK:
            return "Insufficient curated results"
        return "Primary web search"

    def _track_failure(
        self,
        step: SearchStep,
        duration: float,
        error: Exception,
        accumulated: list[SearchResult],
        intent_meta: dict[str, Any],
    ) -> None:
        if step.type == StepType.CATALOG_SEARCH:
            self._telemetry.track_mcp_resources_not_found(
                step.query,
                duration,
                f"Catalog search failed: {error}",
                intent_meta,
            )
            return
        self._telemetry.track_fallback_to_web(
            step.query,
            sum(1 for r in accumulated if r.source == ResultSource.CATALOG),
            duration,
            f"Web search failed: {error}",
            intent_meta,
            success=False,
        )
