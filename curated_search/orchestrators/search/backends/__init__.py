from curated_search.orchestrators.search.backends.catalog import InMemoryCatalogSearch
from curated_search.orchestrators.search.backends.web import SearxngWebSearch

__all__ = [
    "InMemoryCatalogSearch",
    "SearxngWebSearch",
]
