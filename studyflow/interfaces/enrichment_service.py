"""Abstract base class for knowledge enrichment.

Enrichment is two steps: concepts are turned into search queries, then the
queries are searched and condensed.  The pipeline calls them in sequence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from studyflow.models.study import Concept, EnrichedKnowledge


# Concrete implementation: WebEnrichmentService (studyflow/services/)
class IEnrichmentService(ABC):
    """Contract for gathering external knowledge about extracted concepts."""

    @abstractmethod
    def generate_search_queries(self, concepts: list[Concept]) -> list[str]:
        """Return search queries for *concepts*, in concept order."""

    @abstractmethod
    async def enrich(self, queries: list[str]) -> list[EnrichedKnowledge]:
        """Return enrichment entries for *queries*.

        Raises
        ------
        studyflow.utils.errors.EnrichmentError
            If the enrichment backend fails.
        """
