import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from curated_search.observability.sinks import LoggingTelemetrySink, format_event
from curated_search.observability.telemetry import (
    TelemetryEventType,
    TelemetryService,
    TelemetrySource,
)


def _fill_stats_scenario(telemetry: TelemetryService) -> None:
    telemetry.track_mcp_consultation("spring boot")
    telemetry.track_mcp_resources_found("spring boot", 3, 200, ["instruction"])
    telemetry.track_mcp_resources_not_found("vue router", 100)
    telemetry.track_mcp_resources_not_found("vue router", 300)
    telemetry.track_fallback_to_web("graphql", 0, 400, "Insufficient curated results")


class TestRecording:
    def test_track_event_returns_frozen_event(self, telemetry):
        event = telemetry.track_mcp_resources_found(
            "spring", 2, 12.5, ["instruction", "prompt"], {"intent": "best_practices"}
        )

        assert event is not None
        assert event.event_type == TelemetryEventType.MCP_RESOURCES_FOUND
        assert event.source == TelemetrySource.CATALOG
        assert event.metadata.resource_types == ("instruction", "prompt")
        assert event.metadata.intent == "best_practices"
        with pytest.raises(ValidationError):
            event.query = "changed"

    def test_convenience_trackers_set_outcome(self, telemetry):
        consulted = telemetry.track_mcp_consultation("q")
        not_found = telemetry.track_mcp_resources_not_found("q", 5)
        fallback = telemetry.track_fallback_to_web("q", 1, 7, "Insufficient curated results")
        failed = telemetry.track_fallback_to_web("q", 0, 7, "Web search failed", success=False)
        empty = telemetry.track_search_completed("q", 0, 9, ["catalog", "web"])
        done = telemetry.track_search_completed("q", 4, 9, ["web"])

        assert consulted.success is True and consulted.result_count == 0
        assert consulted.metadata is None
        assert not_found.success is False
        assert not_found.metadata.fallback_reason == "No matching resources found"
        assert fallback.source == TelemetrySource.WEB
        assert fallback.result_count == 1
        assert fallback.metadata.search_path == ("catalog", "web")
        assert failed.success is False
        assert empty.success is False
        assert empty.source == TelemetrySource.CATALOG
        assert done.success is True
        assert done.source == TelemetrySource.WEB

    def test_log_is_bounded_fifo(self):
        telemetry = TelemetryService(capacity=3)
        for i in range(5):
            telemetry.track_mcp_consultation(f"q{i}")

        assert len(telemetry) == 3
        assert telemetry.capacity == 3
        assert [e.query for e in telemetry.get_recent_events()] == ["q2", "q3", "q4"]

    def test_disabled_service_records_nothing(self):
        telemetry = TelemetryService(enabled=False)
        assert telemetry.track_mcp_consultation("q") is None
        assert len(telemetry) == 0

        telemetry.set_enabled(True)
        assert telemetry.is_enabled() is True
        assert telemetry.track_mcp_consultation("q") is not None
        assert len(telemetry) == 1

    def test_recent_events_and_clear(self, telemetry):
        for i in range(60):
            telemetry.track_mcp_consultation(f"q{i}")

        assert len(telemetry.get_recent_events()) == 50
        assert telemetry.get_recent_events(2)[-1].query == "q59"
        assert telemetry.get_recent_events(0) == []

        telemetry.clear_data()
        assert telemetry.get_recent_events() == []
        assert telemetry.get_stats().total_consultations == 0


class TestStats:
    def test_empty_log_yields_zero_stats(self, telemetry):
        stats = telemetry.get_stats()
        assert stats.total_consultations == 0
        assert stats.average_response_time == 0
        assert stats.top_queries == []
        assert stats.improvement_suggestions == []

    def test_aggregates_counts_gaps_and_average(self, telemetry):
        _fill_stats_scenario(telemetry)

        stats = telemetry.get_stats()

        assert stats.total_consultations == 1
        assert stats.successful_mcp_consultations == 1
        assert stats.unsuccessful_mcp_consultations == 2
        assert stats.fallback_to_web_count == 1
        # consultation has zero duration and is excluded from the average
        assert stats.average_response_time == 250
        assert [g.query for g in stats.resource_gaps] == ["vue router"]
        assert stats.resource_gaps[0].attempts == 2
        assert stats.improvement_suggestions == [
            'Most requested missing content: "vue router" (2 failed attempts)'
        ]

    def test_top_queries_ordered_by_count(self, telemetry):
        _fill_stats_scenario(telemetry)

        top = telemetry.get_stats().top_queries

        assert [(q.query, q.count) for q in top] == [
            ("spring boot", 2),
            ("vue router", 2),
            ("graphql", 1),
        ]
        assert top[0].success_rate == 1.0
        assert top[1].success_rate == 0.0

    def test_top_queries_capped_at_ten(self, telemetry):
        for i in range(15):
            telemetry.track_mcp_consultation(f"topic {i}")
        assert len(telemetry.get_stats().top_queries) == 10

    def test_high_fallback_rate_suggestion(self, telemetry):
        telemetry.track_fallback_to_web("kotlin coroutines", 0, 50, "Insufficient curated results")

        suggestions = telemetry.get_stats().improvement_suggestions

        assert suggestions == [
            "Consider expanding curated content - high fallback rate to web search detected"
        ]

    def test_slow_and_low_tech_success_suggestions(self, telemetry):
        telemetry.track_mcp_resources_not_found("react hooks", 1500)
        telemetry.track_mcp_resources_found("react hooks", 1, 1500, ["prompt"])
        telemetry.track_mcp_resources_not_found("react hooks", 1500)

        suggestions = telemetry.get_stats().improvement_suggestions

        assert (
            "Consider optimizing search performance - average response time exceeds 1 second"
            in suggestions
        )
        assert "Low success rate for react hooks queries - consider adding more content" in suggestions

    def test_custom_tech_topics(self):
        telemetry = TelemetryService(tech_topics=("elixir",))
        telemetry.track_mcp_resources_not_found("react hooks", 10)
        telemetry.track_mcp_resources_not_found("phoenix elixir", 10)
        telemetry.track_mcp_consultation("phoenix elixir")
        telemetry.track_mcp_resources_not_found("phoenix elixir", 10)

        suggestions = telemetry.get_stats().improvement_suggestions

        assert "Low success rate for phoenix elixir queries - consider adding more content" in (
            suggestions
        )
        assert not any("react hooks queries" in s for s in suggestions)

    def test_ratio_suggestions_need_more_than_ten_consultations(self, telemetry):
        for i in range(10):
            telemetry.track_mcp_consultation(f"q{i}")
            telemetry.track_mcp_resources_found(f"q{i}", 1, 0, ["instruction"])
        assert not any("success rate" in s for s in telemetry.get_stats().improvement_suggestions)

        telemetry.track_mcp_consultation("q10")
        telemetry.track_mcp_resources_found("q10", 1, 0, ["instruction"])
        assert (
            "High curated success rate - users are finding valuable curated content"
            in telemetry.get_stats().improvement_suggestions
        )

    def test_low_overall_success_ratio(self, telemetry):
        for i in range(11):
            telemetry.track_mcp_consultation(f"q{i}")

        assert telemetry.get_stats().improvement_suggestions == [
            "Low overall success rate - repository may need broader content coverage"
        ]

    def test_export_is_json(self, telemetry):
        _fill_stats_scenario(telemetry)

        exported = json.loads(telemetry.export_stats())

        assert exported["total_consultations"] == 1
        assert exported["average_response_time"] == 250
        assert exported["resource_gaps"][0]["query"] == "vue router"


class TestSinks:
    def test_sink_receives_each_event(self, telemetry):
        seen = []
        telemetry.add_sink(seen.append)

        telemetry.track_mcp_consultation("a")
        telemetry.track_mcp_consultation("b")
        telemetry.remove_sink(seen.append)
        telemetry.track_mcp_consultation("c")

        assert [e.query for e in seen] == ["a", "b"]

    def test_failing_sink_does_not_drop_event(self, telemetry):
        def broken(event):
            raise RuntimeError("sink down")

        telemetry.add_sink(broken)

        event = telemetry.track_mcp_consultation("q")

        assert event is not None
        assert len(telemetry) == 1

    def test_format_event_lines(self, telemetry, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        event = telemetry.track_mcp_resources_not_found(
            "vue router", 1500, "Catalog search failed: boom", {"intent": "how_to_build", "confidence": 0.5}
        )

        lines = format_event(event)

        assert lines[0] == "❌ [TELEMETRY] MCP_RESOURCES_NOT_FOUND (1.5s)"
        assert lines[1] == '  Query: "vue router"'
        assert lines[2] == "  Source: catalog | Results: 0 | failed"
        assert "  Intent: how_to_build (confidence: 0.50)" in lines
        assert "  Fallback Reason: Catalog search failed: boom" in lines

    def test_format_event_shows_trace(self, telemetry, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        event = telemetry.track_search_completed(
            "spring",
            3,
            40,
            ["catalog"],
            {"trace": ["Catalog search completed", "Skipped web fallback - sufficient results found"]},
        )

        assert event.metadata.trace == (
            "Catalog search completed",
            "Skipped web fallback - sufficient results found",
        )
        assert (
            "  Trace: Catalog search completed -> Skipped web fallback - sufficient results found"
            in format_event(event)
        )

    def test_logging_sink_writes_through_logger(self, telemetry, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        messages = []
        monkeypatch.setattr(
            "curated_search.observability.sinks.logger.info",
            lambda message, *args, **kwargs: messages.append(message),
        )
        telemetry.add_sink(LoggingTelemetrySink())

        telemetry.track_mcp_consultation("spring")

        assert len(messages) == 1
        assert messages[0].startswith("🔍 [TELEMETRY] MCP_CONSULTED")


@pytest.mark.property
@settings(max_examples=50, deadline=None)
@given(
    capacity=st.integers(min_value=1, max_value=20),
    count=st.integers(min_value=0, max_value=60),
)
def test_log_never_exceeds_capacity(capacity: int, count: int) -> None:
    telemetry = TelemetryService(capacity=capacity)
    for i in range(count):
        telemetry.track_mcp_consultation(f"q{i}")

    events = telemetry.get_recent_events(capacity + 10)
    assert len(events) == min(capacity, count)
    if events:
        assert events[-1].query == f"q{count - 1}"
