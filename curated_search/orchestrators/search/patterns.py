"""Pattern library: intent regex families and technology vocabulary.

The library is plain immutable data. ``IntentRouter`` evaluates every
``(intent, patterns)`` pair uniformly, so adding a category means adding a
pair here, with no branching change in the router.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from curated_search.orchestrators.search.constants import IntentType


def _compile(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


@dataclass(frozen=True)
class PatternLibrary:
    """Immutable classification tables consumed by the intent router."""

    intent_patterns: tuple[tuple[IntentType, tuple[re.Pattern[str], ...]], ...]
    technology_keywords: tuple[str, ...]
    phrase_patterns: tuple[re.Pattern[str], ...]
    stop_words: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_strings(
        cls,
        intent_patterns: Mapping[IntentType, Iterable[str]],
        technology_keywords: Iterable[str],
        phrase_patterns: Iterable[str],
        stop_words: Iterable[str] = (),
    ) -> "PatternLibrary":
        """Build a library from raw regex strings; mapping order is preserved."""
        return cls(
            intent_patterns=tuple(
                (IntentType(intent), _compile(patterns))
                for intent, patterns in intent_patterns.items()
            ),
            technology_keywords=tuple(k.lower() for k in technology_keywords),
            phrase_patterns=_compile(phrase_patterns),
            stop_words=frozenset(w.lower() for w in stop_words),
        )

    def matched_keywords(self, normalized_query: str) -> list[str]:
        """Vocabulary keywords present as substrings, in vocabulary order."""
        return [k for k in self.technology_keywords if k in normalized_query]


INTENT_PATTERNS: dict[IntentType, list[str]] = {
    IntentType.BEST_PRACTICES: [
        r"best\s+practices?",
        r"coding\s+standards?",
        r"conventions?",
        r"guidelines?",
        r"recommended\s+approach",
        r"how\s+should\s+i\s+structure",
        r"proper\s+way\s+to",
        r"standard\s+way\s+to",
        r"optimization\s+practices",
        r"performance\s+best\s+practices",
        r"security\s+best\s+practices",
        r"testing\s+strategies",
        r"clean\s+code",
    ],
    IntentType.HOW_TO_BUILD: [
        r"how\s+to\s+(build|create|make|setup|set\s+up)",
        r"build\s+a\s+new",
        r"create\s+a\s+new",
        r"setup\s+(a\s+)?new",
        r"getting\s+started\s+with",
        r"initialize\s+(a\s+)?new",
        r"scaffold",
    ],
    IntentType.ARCHITECTURE_GUIDANCE: [
        r"architecture",
        r"design\s+patterns?",
        r"project\s+structure",
        r"folder\s+structure",
        r"organize\s+my\s+(code|project)",
        r"microservices?",
        r"system\s+design",
        r"application\s+structure",
    ],
    IntentType.CODE_PATTERNS: [
        r"patterns?\s+for",
        r"examples?\s+of",
        r"template",
        r"boilerplate",
        r"snippet",
        r"sample\s+code",
        r"code\s+example",
    ],
    IntentType.FRAMEWORK_SETUP: [
        r"spring\s+boot",
        r"react\s+app",
        r"vue\s+project",
        r"angular\s+app",
        r"express\s+server",
        r"django\s+project",
        r"rails\s+app",
        r"setup\s+\w+\s+with",
        r"ci/cd\s+pipeline",
        r"deployment\s+setup",
        r"configuration\s+setup",
        r"project\s+setup",
        r"environment\s+setup",
    ],
    IntentType.DEBUGGING_HELP: [
        r"debug",
        r"fix\s+(this\s+)?error",
        r"troubleshoot",
        r"not\s+working",
        r"issue\s+with",
        r"problem\s+with",
        r"why\s+(is|does)",
    ],
}

TECHNOLOGY_KEYWORDS: list[str] = [
    # Languages
    "java", "javascript", "typescript", "python", "csharp", "c#", "kotlin",
    "scala", "go", "rust", "php", "ruby", "swift", "objective-c", "dart",
    "clojure",
    # Frameworks & libraries
    "spring", "springboot", "spring boot", "react", "vue", "angular",
    "express", "django", "rails", "flask", "fastapi", "laravel", "symfony",
    "gin", "echo", "actix", "tokio", "flutter", "react native", "nextjs",
    "nuxt", "svelte", "blazor", "xamarin",
    # Platforms
    "docker", "kubernetes", "microservices", "api", "rest", "graphql",
    "grpc", "oauth", "jwt", "redis", "mongodb", "postgresql", "mysql",
    "elasticsearch", "kafka", "rabbitmq",
    # Cloud
    "aws", "azure", "gcp", "terraform", "bicep", "cloudformation",
    "serverless",
]

PHRASE_PATTERNS: list[str] = [
    # qualifier + word
    r"(?:best|good|proper|standard|recommended)\s+\w+",
    # subject + practice/approach noun
    r"\b\w+(?:\s+\w+){0,2}\s+(?:pattern|practice|approach|way|method)\b",
    # action verb + object
    r"\b(?:build|create|setup|configure|implement)\s+\w+(?:\s+\w+){0,2}",
]

STOP_WORDS: list[str] = ["the", "and", "for", "with", "that", "this", "how"]


DEFAULT_PATTERN_LIBRARY = PatternLibrary.from_strings(
    intent_patterns=INTENT_PATTERNS,
    technology_keywords=TECHNOLOGY_KEYWORDS,
    phrase_patterns=PHRASE_PATTERNS,
    stop_words=STOP_WORDS,
)
