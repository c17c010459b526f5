from collections.abc import Sequence

import pytest

from curated_search.contracts.backends_v1 import CatalogItem, CatalogPreview, WebHit
from curated_search.observability.telemetry import TelemetryService
from curated_search.orchestrators.search.interface import CatalogSearch, WebSearch


class FakeCatalog(CatalogSearch):
    """Catalog double that records calls and can be told to fail."""

    def __init__(
        self,
        items: Sequence[CatalogItem | dict] = (),
        contents: dict[str, str] | None = None,
        error: Exception | None = None,
        preview_error: Exception | None = None,
    ):
        self.items = list(items)
        self.contents = contents or {}
        self.error = error
        self.preview_error = preview_error
        self.search_calls: list[str] = []
        self.preview_calls: list[str] = []

    async def search(self, query: str):
        self.search_calls.append(query)
        if self.error is not None:
            raise self.error
        return self.items

    async def preview(self, path: str):
        self.preview_calls.append(path)
        if self.preview_error is not None:
            raise self.preview_error
        return CatalogPreview(title=path, content=self.contents.get(path, ""))


class FakeWeb(WebSearch):
    def __init__(self, hits: Sequence[WebHit | dict] = (), error: Exception | None = None):
        self.hits = list(hits)
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def search(self, query: str, max_results: int = 5):
        self.calls.append((query, max_results))
        if self.error is not None:
            raise self.error
        return self.hits[:max_results]


def catalog_item(title: str, path: str, kind: str | None = "instruction") -> CatalogItem:
    return CatalogItem(title=title, path=path, raw_url=f"https://raw.example/{path}", kind=kind)


@pytest.fixture
def telemetry() -> TelemetryService:
    return TelemetryService()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests that require a live SearXNG instance.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "integration: requires runtime services or user configuration"
    )
    config.addinivalue_line("markers", "property: property-based deterministic tests")


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: Sequence[pytest.Item],
) -> None:
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="integration is opt-in; rerun with --run-integration"
    )
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip_integration)


@pytest.fixture
def make_catalog():
    return FakeCatalog


@pytest.fixture
def make_web():
    return FakeWeb


@pytest.fixture
def make_item():
    return catalog_item
