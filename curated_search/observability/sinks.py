"""Telemetry sinks: optional observers attached to ``TelemetryService``."""

from curated_search.core.logger import color, format_duration_ms, logger, reset
from curated_search.observability.telemetry import TelemetryEvent, TelemetryEventType

_ICONS: dict[str, str] = {
    TelemetryEventType.MCP_CONSULTED: "🔍",
    TelemetryEventType.MCP_RESOURCES_FOUND: "✅",
    TelemetryEventType.MCP_RESOURCES_NOT_FOUND: "❌",
    TelemetryEventType.FALLBACK_TO_WEB: "🌐",
    TelemetryEventType.SEARCH_COMPLETED: "📊",
}


def format_event(event: TelemetryEvent) -> list[str]:
    """Human-readable lines for one event."""
    icon = _ICONS.get(event.event_type, "📝")
    duration = (
        f" {color('duration')}({format_duration_ms(event.duration)}){reset()}"
        if event.duration
        else ""
    )
    status = (
        f"{color('ok')}ok{reset()}" if event.success else f"{color('fail')}failed{reset()}"
    )
    lines = [
        f"{icon} [TELEMETRY] {event.event_type.upper()}{duration}",
        f'  Query: {color("query")}"{event.query}"{reset()}',
        f"  Source: {color('source')}{event.source}{reset()} | "
        f"Results: {event.result_count} | {status}",
    ]
    meta = event.metadata
    if meta is not None:
        if meta.intent:
            confidence = "unknown" if meta.confidence is None else f"{meta.confidence:.2f}"
            lines.append(f"  Intent: {meta.intent} (confidence: {confidence})")
        if meta.resource_types:
            lines.append(f"  Resource Types: {', '.join(meta.resource_types)}")
        if meta.fallback_reason:
            lines.append(f"  Fallback Reason: {meta.fallback_reason}")
        if meta.trace:
            lines.append(f"  Trace: {' -> '.join(meta.trace)}")
    return lines


class LoggingTelemetrySink:
    """Echo events through the package logger at INFO (or DEBUG)."""

    def __init__(self, verbose: bool = True) -> None:
        self._verbose = verbose

    def __call__(self, event: TelemetryEvent) -> None:
        lines = format_event(event)
        if self._verbose:
            logger.info("\n".join(lines))
        else:
            logger.debug(lines[0])
