from collections.abc import AsyncIterator

import pytest_asyncio

from curated_search.core.bootstrap import build_search_router
from curated_search.orchestrators.search.backends import InMemoryCatalogSearch
from curated_search.orchestrators.search.orchestrator import SearchRouter

CATALOG = [
    {
        "title": "Spring Boot Best Practices",
        "path": "instructions/spring-boot.instructions.md",
        "type": "instruction",
    },
    {
        "title": "Python Testing with pytest",
        "path": "prompts/python-pytest.prompt.md",
        "type": "prompt",
    },
]


@pytest_asyncio.fixture
async def router() -> AsyncIterator[SearchRouter]:
    """Router wired from the environment; web steps hit the live SearXNG."""
    instance = build_search_router(
        InMemoryCatalogSearch(
            CATALOG,
            contents={"instructions/spring-boot.instructions.md": "# Spring Boot\n..."},
        )
    )
    yield instance
    instance.clear_telemetry()
