"""Telemetry: records catalog consultations and outcomes, derives coverage stats.

Events live in a bounded in-memory log (FIFO eviction) for the lifetime of
the process. Nothing is persisted. Human-readable echo is delegated to
optional sinks (see ``curated_search.observability.sinks``).
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from curated_search.core.logger import logger

DEFAULT_CAPACITY = 1000
TOP_QUERY_LIMIT = 10
RESOURCE_GAP_LIMIT = 5
SLOW_RESPONSE_MS = 1000
MIN_CONSULTATIONS_FOR_RATIO = 10
DEFAULT_TECH_TOPICS = ("java", "spring", "react", "python")


class TelemetryEventType(StrEnum):
    MCP_CONSULTED = "mcp_consulted"
    MCP_RESOURCES_FOUND = "mcp_resources_found"
    MCP_RESOURCES_NOT_FOUND = "mcp_resources_not_found"
    FALLBACK_TO_WEB = "fallback_to_web"
    SEARCH_COMPLETED = "search_completed"


class TelemetrySource(StrEnum):
    CATALOG = "catalog"
    WEB = "web"


class TelemetryMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    intent: str | None = None
    confidence: float | None = None
    resource_types: tuple[str, ...] | None = None
    fallback_reason: str | None = None
    search_path: tuple[str, ...] | None = None
    trace: tuple[str, ...] | None = None
    skipped_steps: int | None = None


class TelemetryEvent(BaseModel):
    """Immutable record of one observable routing outcome."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    event_type: TelemetryEventType
    query: str
    source: TelemetrySource
    result_count: int = 0
    success: bool = True
    duration: float = Field(default=0.0, description="Elapsed milliseconds")
    metadata: TelemetryMetadata | None = None


class QueryStat(BaseModel):
    query: str
    count: int
    success_rate: float


class ResourceGap(BaseModel):
    query: str
    attempts: int
    reason: str = "No matching curated content found"


class TelemetryStats(BaseModel):
    total_consultations: int = 0
    successful_mcp_consultations: int = 0
    unsuccessful_mcp_consultations: int = 0
    fallback_to_web_count: int = 0
    average_response_time: int = 0
    top_queries: list[QueryStat] = Field(default_factory=list)
    resource_gaps: list[ResourceGap] = Field(default_factory=list)
    improvement_suggestions: list[str] = Field(default_factory=list)


TelemetrySink = Callable[[TelemetryEvent], None]


def _metadata(
    metadata: dict[str, Any] | None, **overrides: Any
) -> TelemetryMetadata | None:
    merged = {**(metadata or {}), **{k: v for k, v in overrides.items() if v is not None}}
    if not merged:
        return None
    for key in ("resource_types", "search_path", "trace"):
        if merged.get(key) is not None:
            merged[key] = tuple(merged[key])
    return TelemetryMetadata.model_validate(merged)


class TelemetryService:
    """Bounded event log plus on-demand aggregation.

    Instances are independent; the router receives one explicitly.
    """

    def __init__(
        self,
        enabled: bool = True,
        capacity: int = DEFAULT_CAPACITY,
        sinks: Iterable[TelemetrySink] = (),
        tech_topics: Iterable[str] = DEFAULT_TECH_TOPICS,
    ) -> None:
        self._enabled = enabled
        self._lock = threading.Lock()
        self._events: deque[TelemetryEvent] = deque(maxlen=max(1, capacity))
        self._sinks: list[TelemetrySink] = list(sinks)
        self._tech_topics = tuple(t.lower() for t in tech_topics)

    @property
    def capacity(self) -> int:
        return self._events.maxlen or DEFAULT_CAPACITY

    def __len__(self) -> int:
        return len(self._events)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def track_event(
        self,
        event_type: TelemetryEventType,
        query: str,
        source: TelemetrySource,
        result_count: int = 0,
        success: bool = True,
        duration: float = 0.0,
        metadata: TelemetryMetadata | None = None,
    ) -> TelemetryEvent | None:
        """Append one event; returns it, or ``None`` when telemetry is disabled."""
        if not self._enabled:
            return None

        event = TelemetryEvent(
            timestamp=datetime.now(UTC).isoformat(),
            event_type=event_type,
            query=query,
            source=source,
            result_count=result_count,
            success=success,
            duration=duration,
            metadata=metadata,
        )
        with self._lock:
            # deque(maxlen=...) evicts the oldest entry on overflow.
            self._events.append(event)
            sinks = list(self._sinks)

        for sink in sinks:
            try:
                sink(event)
            except Exception as e:
                logger.warning("Telemetry sink %r failed: %s", sink, e)
        return event

    def track_mcp_consultation(
        self, query: str, duration: float = 0.0, metadata: dict[str, Any] | None = None
    ) -> TelemetryEvent | None:
        return self.track_event(
            TelemetryEventType.MCP_CONSULTED,
            query,
            TelemetrySource.CATALOG,
            result_count=0,
            success=True,
            duration=duration,
            metadata=_metadata(metadata),
        )

    def track_mcp_resources_found(
        self,
        query: str,
        result_count: int,
        duration: float,
        resource_types: Iterable[str],
        metadata: dict[str, Any] | None = None,
    ) -> TelemetryEvent | None:
        return self.track_event(
            TelemetryEventType.MCP_RESOURCES_FOUND,
            query,
            TelemetrySource.CATALOG,
            result_count=result_count,
            success=True,
            duration=duration,
            metadata=_metadata(metadata, resource_types=list(resource_types)),
        )

    def track_mcp_resources_not_found(
        self,
        query: str,
        duration: float,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TelemetryEvent | None:
        return self.track_event(
            TelemetryEventType.MCP_RESOURCES_NOT_FOUND,
            query,
            TelemetrySource.CATALOG,
            result_count=0,
            success=False,
            duration=duration,
            metadata=_metadata(
                metadata, fallback_reason=reason or "No matching resources found"
            ),
        )

    def track_fallback_to_web(
        self,
        query: str,
        catalog_result_count: int,
        duration: float,
        reason: str,
        metadata: dict[str, Any] | None = None,
        success: bool = True,
    ) -> TelemetryEvent | None:
        return self.track_event(
            TelemetryEventType.FALLBACK_TO_WEB,
            query,
            TelemetrySource.WEB,
            result_count=catalog_result_count,
            success=success,
            duration=duration,
            metadata=_metadata(
                metadata,
                fallback_reason=reason,
                search_path=[TelemetrySource.CATALOG, TelemetrySource.WEB],
            ),
        )

    def track_search_completed(
        self,
        query: str,
        total_results: int,
        duration: float,
        sources: Iterable[str],
        metadata: dict[str, Any] | None = None,
    ) -> TelemetryEvent | None:
        sources = list(sources)
        source = (
            TelemetrySource.CATALOG
            if TelemetrySource.CATALOG in sources
            else TelemetrySource.WEB
        )
        return self.track_event(
            TelemetryEventType.SEARCH_COMPLETED,
            query,
            source,
            result_count=total_results,
            success=total_results > 0,
            duration=duration,
            metadata=_metadata(metadata, search_path=sources),
        )

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def _snapshot(self) -> list[TelemetryEvent]:
        with self._lock:
            return list(self._events)

    def get_stats(self) -> TelemetryStats:
        events = self._snapshot()
        stats = TelemetryStats()
        if not events:
            return stats

        duration_total = 0.0
        duration_count = 0
        per_query: dict[str, list[int]] = {}

        for e in events:
            if e.event_type == TelemetryEventType.MCP_CONSULTED:
                stats.total_consultations += 1
            elif e.event_type == TelemetryEventType.MCP_RESOURCES_FOUND:
                stats.successful_mcp_consultations += 1
            elif e.event_type == TelemetryEventType.MCP_RESOURCES_NOT_FOUND:
                stats.unsuccessful_mcp_consultations += 1
            elif e.event_type == TelemetryEventType.FALLBACK_TO_WEB:
                stats.fallback_to_web_count += 1

            if e.duration > 0:
                duration_total += e.duration
                duration_count += 1

            # [count, successes]
            entry = per_query.setdefault(e.query, [0, 0])
            entry[0] += 1
            if e.success:
                entry[1] += 1

        if duration_count:
            stats.average_response_time = round(duration_total / duration_count)

        by_count = sorted(per_query.items(), key=lambda kv: -kv[1][0])
        stats.top_queries = [
            QueryStat(query=q, count=c, success_rate=round(s / c, 2))
            for q, (c, s) in by_count[:TOP_QUERY_LIMIT]
        ]
        stats.resource_gaps = [
            ResourceGap(query=q, attempts=c)
            for q, (c, s) in by_count
            if c >= 2 and s == 0
        ][:RESOURCE_GAP_LIMIT]
        stats.improvement_suggestions = self._improvement_suggestions(stats)
        return stats

    def _improvement_suggestions(self, stats: TelemetryStats) -> list[str]:
        """Each heuristic is evaluated independently of the others."""
        suggestions: list[str] = []

        if stats.fallback_to_web_count > stats.successful_mcp_consultations:
            suggestions.append(
                "Consider expanding curated content - high fallback rate to web search detected"
            )

        if stats.resource_gaps:
            top_gap = stats.resource_gaps[0]
            suggestions.append(
                f'Most requested missing content: "{top_gap.query}" '
                f"({top_gap.attempts} failed attempts)"
            )

        if stats.average_response_time > SLOW_RESPONSE_MS:
            suggestions.append(
                "Consider optimizing search performance - average response time exceeds 1 second"
            )

        tech_queries = [
            q
            for q in stats.top_queries
            if any(topic in q.query.lower() for topic in self._tech_topics)
        ]
        if tech_queries and tech_queries[0].success_rate < 0.5:
            suggestions.append(
                f"Low success rate for {tech_queries[0].query} queries - consider adding more content"
            )

        if stats.total_consultations > MIN_CONSULTATIONS_FOR_RATIO:
            ratio = stats.successful_mcp_consultations / stats.total_consultations
            if ratio < 0.3:
                suggestions.append(
                    "Low overall success rate - repository may need broader content coverage"
                )
            elif ratio > 0.8:
                suggestions.append(
                    "High curated success rate - users are finding valuable curated content"
                )

        return suggestions

    def export_stats(self) -> str:
        return self.get_stats().model_dump_json(indent=2)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def get_recent_events(self, limit: int = 50) -> list[TelemetryEvent]:
        """Last ``limit`` events, oldest first."""
        if limit <= 0:
            return []
        return self._snapshot()[-limit:]

    def clear_data(self) -> None:
        with self._lock:
            self._events.clear()

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def is_enabled(self) -> bool:
        return self._enabled

    def add_sink(self, sink: TelemetrySink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def remove_sink(self, sink: TelemetrySink) -> None:
        with self._lock:
            if sink in self._sinks:
                self._sinks.remove(sink)
