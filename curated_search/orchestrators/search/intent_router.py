"""Deterministic intent router: decides whether curated content should lead.

Composable steps:
- pattern-family scoring (one confidence per intent category)
- technology keyword boost
- routing decision against live preferences
- search term extraction
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from curated_search.observability import traceable
from curated_search.orchestrators.search.constants import (
    BASE_CONFIDENCE,
    CONFIDENCE_CAP,
    KEYWORD_BOOST_FLOOR,
    KEYWORD_BOOST_STEP,
    MAX_SEARCH_TERMS,
    PATTERN_CONFIDENCE_CAP,
    PATTERN_MATCH_STEP,
    SUPPLEMENTARY_MIN_CONFIDENCE,
    TECH_ROUTE_MIN_CONFIDENCE,
    IntentType,
    StepPriority,
    StepType,
)
from curated_search.orchestrators.search.models import (
    MCPPreferences,
    QueryIntent,
    SearchStep,
    SearchStrategy,
)
from curated_search.orchestrators.search.patterns import (
    DEFAULT_PATTERN_LIBRARY,
    PatternLibrary,
)

logger = logging.getLogger(__name__)

PreferencesInput = MCPPreferences | dict[str, Any] | None


@dataclass
class CategoryMatch:
    """Best-scoring intent category plus the trace of how it was reached."""

    intent_type: IntentType = IntentType.GENERAL_QUESTION
    confidence: float = 0.0
    reasons: list[str] = field(default_factory=list)


def pattern_confidence(matches: int) -> float:
    """Confidence for a category that matched ``matches`` patterns."""
    if matches <= 0:
        return 0.0
    return round(min(PATTERN_CONFIDENCE_CAP, BASE_CONFIDENCE + PATTERN_MATCH_STEP * matches), 3)


def boosted_confidence(confidence: float, keyword_count: int) -> float:
    """Apply the technology keyword boost once; only above the boost floor."""
    if keyword_count <= 0 or confidence <= KEYWORD_BOOST_FLOOR:
        return confidence
    return round(min(CONFIDENCE_CAP, confidence + KEYWORD_BOOST_STEP * keyword_count), 3)


class IntentRouter:
    """Scores queries against a pattern library and plans search steps."""

    def __init__(
        self,
        library: PatternLibrary | None = None,
        default_preferences: PreferencesInput = None,
    ) -> None:
        self._library = library if library is not None else DEFAULT_PATTERN_LIBRARY
        self._default_preferences = MCPPreferences().merged(default_preferences)

    @property
    def library(self) -> PatternLibrary:
        return self._library

    @property
    def default_preferences(self) -> MCPPreferences:
        return self._default_preferences

    def analyze_intent(
        self, query: str, preferences: PreferencesInput = None
    ) -> QueryIntent:
        prefs = self._default_preferences.merged(preferences)
        normalized = (query or "").strip().lower()

        best = self._best_category(normalized)
        keywords = self._library.matched_keywords(normalized)
        confidence = boosted_confidence(best.confidence, len(keywords))
        terms = self.generate_search_terms(normalized, keywords)

        should_use_mcp = False
        if prefs.mcp_first and confidence >= prefs.min_confidence_threshold:
            should_use_mcp = True
            reasoning = (
                f"High confidence {best.intent_type} query with curated content likely available"
            )
        elif (
            prefs.mcp_only_for_best_practices
            and best.intent_type == IntentType.BEST_PRACTICES
        ):
            should_use_mcp = True
            reasoning = "Best practices query - prioritizing curated community content"
        elif keywords and confidence > TECH_ROUTE_MIN_CONFIDENCE:
            should_use_mcp = True
            reasoning = (
                f"Technology-specific query ({', '.join(keywords)}) may have curated guidance"
            )
        else:
            reasoning = f"Low confidence for curated content ({confidence:.2f})"

        logger.debug(
            "Intent: type=%s confidence=%.2f keywords=%s patterns=%s use_catalog=%s",
            best.intent_type,
            confidence,
            keywords,
            best.reasons,
            should_use_mcp,
        )
        return QueryIntent(
            intent_type=best.intent_type,
            confidence=confidence,
            should_use_mcp=should_use_mcp,
            suggested_search_terms=terms,
            reasoning=reasoning,
        )

    def _best_category(self, normalized: str) -> CategoryMatch:
        """Highest-confidence category; earlier categories win ties."""
        best = CategoryMatch()
        for intent_type, patterns in self._library.intent_patterns:
            hits = [p.pattern for p in patterns if p.search(normalized)]
            if not hits:
                continue
            confidence = pattern_confidence(len(hits))
            # Strict comparison keeps the first category on equal confidence.
            if confidence > best.confidence:
                best = CategoryMatch(
                    intent_type=intent_type,
                    confidence=confidence,
                    reasons=[f"{intent_type}:{h}" for h in hits],
                )
        return best

    def generate_search_terms(self, normalized: str, keywords: list[str]) -> list[str]:
        terms: dict[str, None] = dict.fromkeys(keywords)

        for pattern in self._library.phrase_patterns:
            for phrase in pattern.findall(normalized):
                cleaned = re.sub(r"[^\w\s]", "", phrase.lower()).strip()
                if len(cleaned) > 3:
                    terms.setdefault(cleaned)

        if not terms:
            words = [
                w
                for w in normalized.split()
                if len(w) > 3 and w not in self._library.stop_words
            ]
            terms = dict.fromkeys(words[:3])

        return list(terms)[:MAX_SEARCH_TERMS]

    @traceable(name="create_search_strategy", run_type="chain")
    def create_search_strategy(
        self, query: str, preferences: PreferencesInput = None
    ) -> SearchStrategy:
        prefs = self._default_preferences.merged(preferences)
        intent = self.analyze_intent(query, prefs)
        return SearchStrategy(
            intent=intent,
            steps=self._plan_steps(intent, prefs),
            explanation=self._explain(intent),
        )

    def _plan_steps(
        self, intent: QueryIntent, prefs: MCPPreferences
    ) -> list[SearchStep]:
        step_query = " ".join(intent.suggested_search_terms)
        steps: list[SearchStep] = []

        if intent.should_use_mcp:
            steps.append(
                SearchStep(
                    type=StepType.CATALOG_SEARCH,
                    query=step_query,
                    priority=StepPriority.HIGH,
                    reasoning=intent.reasoning,
                )
            )
            if prefs.fallback_to_web:
                steps.append(
                    SearchStep(
                        type=StepType.WEB_SEARCH,
                        query=step_query,
                        priority=StepPriority.FALLBACK,
                        reasoning="Fallback if curated search yields insufficient results",
                    )
                )
            return steps

        steps.append(
            SearchStep(
                type=StepType.WEB_SEARCH,
                query=step_query,
                priority=StepPriority.HIGH,
                reasoning="Primary search for general or low-confidence queries",
            )
        )
        if intent.confidence > SUPPLEMENTARY_MIN_CONFIDENCE:
            steps.append(
                SearchStep(
                    type=StepType.CATALOG_SEARCH,
                    query=step_query,
                    priority=StepPriority.SUPPLEMENTARY,
                    reasoning="Check for any relevant curated content",
                )
            )
        return steps

    @staticmethod
    def _explain(intent: QueryIntent) -> str:
        if intent.should_use_mcp:
            return (
                f"Searching curated content first for {intent.intent_type} "
                f"(confidence: {intent.confidence * 100:.0f}%)"
            )
        return (
            f"Using web search for {intent.intent_type} query "
            "with curated content as supplement"
        )
