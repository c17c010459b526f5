"""Shared typed constants for query routing control flow."""

from enum import StrEnum


class IntentType(StrEnum):
    """Intent categories produced by intent analysis.

    Declaration order is also the tie-break order when two categories reach
    the same confidence (the earlier category wins).
    """

    BEST_PRACTICES = "best_practices"
    HOW_TO_BUILD = "how_to_build"
    ARCHITECTURE_GUIDANCE = "architecture_guidance"
    CODE_PATTERNS = "code_patterns"
    FRAMEWORK_SETUP = "framework_setup"
    DEBUGGING_HELP = "debugging_help"
    GENERAL_QUESTION = "general_question"


class StepType(StrEnum):
    CATALOG_SEARCH = "catalog_search"
    WEB_SEARCH = "web_search"


class StepPriority(StrEnum):
    HIGH = "high"
    FALLBACK = "fallback"
    SUPPLEMENTARY = "supplementary"


class ResultSource(StrEnum):
    CATALOG = "catalog"
    WEB = "web"


WEB_RESULT_TYPE = "web_result"

# Confidence arithmetic for pattern/keyword scoring.
BASE_CONFIDENCE = 0.3
PATTERN_MATCH_STEP = 0.2
PATTERN_CONFIDENCE_CAP = 0.9
KEYWORD_BOOST_STEP = 0.1
KEYWORD_BOOST_FLOOR = 0.3
CONFIDENCE_CAP = 0.95
TECH_ROUTE_MIN_CONFIDENCE = 0.4
SUPPLEMENTARY_MIN_CONFIDENCE = 0.3

MAX_SEARCH_TERMS = 5
SUFFICIENT_RESULTS = 3
