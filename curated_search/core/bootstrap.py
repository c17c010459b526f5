"""Router wiring from configuration at startup."""

from curated_search.core.config import config
from curated_search.core.logger import logger
from curated_search.observability import LoggingTelemetrySink, TelemetryService
from curated_search.orchestrators.search.backends import SearxngWebSearch
from curated_search.orchestrators.search.interface import CatalogSearch, WebSearch
from curated_search.orchestrators.search.models import MCPPreferences
from curated_search.orchestrators.search.orchestrator import SearchRouter


def preferences_from_config() -> MCPPreferences:
    return MCPPreferences(
        mcp_first=config.mcp_first,
        mcp_only_for_best_practices=config.mcp_only_for_best_practices,
        fallback_to_web=config.fallback_to_web,
        min_confidence_threshold=config.min_confidence_threshold,
    )


def build_telemetry() -> TelemetryService:
    telemetry = TelemetryService(
        enabled=config.telemetry_enabled,
        capacity=config.telemetry_max_events,
    )
    if config.telemetry_echo:
        telemetry.add_sink(LoggingTelemetrySink())
    return telemetry


def build_search_router(
    catalog: CatalogSearch,
    web: WebSearch | None = None,
    telemetry: TelemetryService | None = None,
) -> SearchRouter:
    """Build a router from environment configuration.

    Without an explicit web backend, SearXNG at ``SEARXNG_URL`` is used.
    """
    for problem in config.validate():
        logger.warning("Config: %s", problem)

    if web is None:
        web = SearxngWebSearch()
        if not web.endpoint:
            logger.warning("SEARXNG_URL not set; web steps will return no results")

    router = SearchRouter(
        catalog=catalog,
        web=web,
        telemetry=telemetry if telemetry is not None else build_telemetry(),
        preferences=preferences_from_config(),
    )
    logger.info(
        "Search router ready: preferences=%s telemetry=%s",
        router.get_preferences().model_dump(),
        "on" if router.telemetry.is_enabled() else "off",
    )
    return router
