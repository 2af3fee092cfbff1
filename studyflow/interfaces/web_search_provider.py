"""Abstract base class for web-search service providers.

Enrichment turns concept names into search queries and summarises the
results into :class:`~studyflow.models.study.EnrichedKnowledge` entries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResult:
    """A single web-search result.

    Attributes
    ----------
    title:
        The page title as returned by the search engine.
    url:
        The canonical URL of the result page.
    snippet:
        An optional text excerpt/description from the result.
    """

    title: str
    url: str
    snippet: str | None = None


class IWebSearchProvider(ABC):
    """Contract for web-search services used during enrichment."""

    @abstractmethod
    async def search(self, query: str, num_results: int = 10) -> list[SearchResult]:
        """Execute a web search and return the top results.

        Parameters
        ----------
        query:
            The search query string.
        num_results:
            Maximum number of results to return.

        Returns
        -------
        list[SearchResult]
            Zero or more results ordered by relevance.

        Raises
        ------
        studyflow.utils.errors.EnrichmentError
            If the search call fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this search provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and reachable."""
