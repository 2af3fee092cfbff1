"""Web enrichment for extracted concepts.

Builds search queries from concept names, then runs the first few through
an :class:`~studyflow.interfaces.web_search_provider.IWebSearchProvider` and
condenses each query's results into an
:class:`~studyflow.models.study.EnrichedKnowledge` entry whose citations
point back at the result pages.
"""

from __future__ import annotations

import structlog

from studyflow.interfaces.enrichment_service import IEnrichmentService
from studyflow.interfaces.web_search_provider import IWebSearchProvider, SearchResult
from studyflow.models.study import Citation, Concept, EnrichedKnowledge
from studyflow.utils.errors import EnrichmentError, StudyFlowError

logger = structlog.get_logger(logger_name=__name__)

_SUMMARY_MAX_CHARS = 600
_EXCERPT_MAX_CHARS = 200


class WebEnrichmentService(IEnrichmentService):
    """Gathers external material about concepts through web search.

    Parameters
    ----------
    search_provider:
        The web-search backend.
    max_concepts:
        Only the first *max_concepts* concepts produce search queries.
    max_topics:
        Only the first *max_topics* queries are actually searched.
    results_per_query:
        ``num_results`` passed to the search provider.
    """

    def __init__(
        self,
        search_provider: IWebSearchProvider,
        max_concepts: int = 5,
        max_topics: int = 3,
        results_per_query: int = 3,
    ) -> None:
        self._search = search_provider
        self._max_concepts = max_concepts
        self._max_topics = max_topics
        self._results_per_query = results_per_query

    def generate_search_queries(self, concepts: list[Concept]) -> list[str]:
        """Return search queries for the leading concepts, in concept order."""
        queries: list[str] = []
        for concept in concepts[: self._max_concepts]:
            queries.append(f"{concept.name} definition and examples")
            queries.append(f"{concept.name} latest research and applications")
            if concept.common_misconceptions:
                queries.append(f"Common misconceptions about {concept.name}")
        return queries

    async def enrich(self, queries: list[str]) -> list[EnrichedKnowledge]:
        """Search the first *max_topics* queries and summarise their results.

        Queries with no results produce no entry.

        Raises
        ------
        EnrichmentError
            If the search provider fails.
        """
        queries = queries[: self._max_topics]
        provider_name = self._search.get_provider_name()
        logger.info("enrichment_started", queries=len(queries), provider=provider_name)

        knowledge: list[EnrichedKnowledge] = []
        for query in queries:
            try:
                results = await self._search.search(query, num_results=self._results_per_query)
            except StudyFlowError:
                raise
            except Exception as exc:
                logger.error("enrichment_search_failed", query=query, error=str(exc))
                raise EnrichmentError(
                    message=f"Search failed for '{query}': {exc}",
                    provider_name=provider_name,
                ) from exc

            if not results:
                logger.debug("enrichment_no_results", query=query)
                continue
            knowledge.append(self._summarise(query, results))

        logger.info("enrichment_complete", topics=len(knowledge))
        return knowledge

    @staticmethod
    def _summarise(query: str, results: list[SearchResult]) -> EnrichedKnowledge:
        snippets: list[str] = []
        for result in results:
            snippet = (result.snippet or "").strip()
            if snippet and snippet not in snippets:
                snippets.append(snippet)

        summary = " ".join(snippets)
        if len(summary) > _SUMMARY_MAX_CHARS:
            summary = summary[: _SUMMARY_MAX_CHARS - 3].rstrip() + "..."

        citations = [
            Citation(
                source=result.title,
                url=result.url,
                excerpt=(result.snippet or "")[:_EXCERPT_MAX_CHARS],
            )
            for result in results
        ]
        return EnrichedKnowledge(topic=query, summary=summary, citations=citations)
