"""Routing preferences, intent, strategy and response models for the router."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from curated_search.orchestrators.search.constants import (
    IntentType,
    ResultSource,
    StepPriority,
    StepType,
)


class MCPPreferences(BaseModel):
    """Live routing preferences.

    Values are type-checked only. Out-of-range thresholds are accepted as-is
    and simply make the curated route always or never win.
    Unknown keys are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mcp_first: bool = True
    mcp_only_for_best_practices: bool = False
    fallback_to_web: bool = True
    min_confidence_threshold: float = 0.6

    def merged(
        self, partial: "MCPPreferences | dict[str, Any] | None"
    ) -> "MCPPreferences":
        """Return ``self`` with ``partial`` applied.

        A full ``MCPPreferences`` replaces every field; a mapping only
        overrides the keys it carries.
        """
        if partial is None:
            return self
        if isinstance(partial, MCPPreferences):
            return partial
        return MCPPreferences.model_validate({**self.model_dump(), **dict(partial)})


class QueryIntent(BaseModel):
    intent_type: IntentType = IntentType.GENERAL_QUESTION
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    should_use_mcp: bool = False
    suggested_search_terms: list[str] = Field(default_factory=list, max_length=5)
    reasoning: str = ""


class SearchStep(BaseModel):
    type: StepType
    query: str
    priority: StepPriority
    reasoning: str = ""


class SearchStrategy(BaseModel):
    intent: QueryIntent
    steps: list[SearchStep] = Field(default_factory=list)
    explanation: str = ""


class SearchResult(BaseModel):
    """One merged result; immutable once built by the orchestrator."""

    model_config = ConfigDict(frozen=True)

    source: ResultSource
    title: str
    content: str | None = None
    url: str | None = None
    relevance_score: float = Field(default=0.0, ge=0.0, le=1.0)
    type: str | None = Field(
        default=None, description="Catalog item kind or 'web_result'"
    )


class SearchPathStep(BaseModel):
    """One entry of the human-readable search trace."""

    action: str
    source: ResultSource
    query: str
    result_count: int = 0
    duration: float = Field(default=0.0, description="Elapsed milliseconds")
    success: bool = True


class RouterSearchResponse(BaseModel):
    """Final response from the search router."""

    results: list[SearchResult] = Field(default_factory=list, description="Ordered search results")
    strategy: SearchStrategy
    search_path: list[SearchPathStep] = Field(
        default_factory=list, description="Executed, skipped and failed steps in order"
    )
    recommendations: list[str] = Field(default_factory=list)
