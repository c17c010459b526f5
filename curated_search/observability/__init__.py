"""Observability: LangSmith tracing and in-process routing telemetry."""

from curated_search.observability.langsmith import (
    flush,
    get_client,
    traceable,
)
from curated_search.observability.sinks import LoggingTelemetrySink
from curated_search.observability.telemetry import (
    TelemetryEvent,
    TelemetryEventType,
    TelemetryService,
    TelemetrySource,
    TelemetryStats,
)

__all__ = [
    "LoggingTelemetrySink",
    "TelemetryEvent",
    "TelemetryEventType",
    "TelemetryService",
    "TelemetrySource",
    "TelemetryStats",
    "flush",
    "get_client",
    "traceable",
]
