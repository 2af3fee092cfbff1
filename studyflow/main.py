"""Composition root for StudyFlow.

Wires providers and services together from :class:`Settings`.  There is no
bundled LLM or web-search backend, so callers pass their own adapters; every
other collaborator has an in-process default.
"""

from __future__ import annotations

import random
from typing import Any

from studyflow.config.settings import Settings
from studyflow.interfaces.embedding_provider import IEmbeddingProvider
from studyflow.interfaces.llm_provider import ILLMProvider
from studyflow.interfaces.text_source import ITextSource
from studyflow.interfaces.web_search_provider import IWebSearchProvider
from studyflow.pipeline.orchestrator import StudyFlowPipeline
from studyflow.pipeline.progress_tracker import ProgressTracker
from studyflow.providers.cache.memory_cache import MemoryCacheProvider
from studyflow.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from studyflow.providers.repository.memory_document_repository import (
    InMemoryDocumentRepository,
)
from studyflow.providers.text.memory_text_source import InMemoryTextSource
from studyflow.services.chunker import SectionChunker
from studyflow.services.content_generator import StudyContentGenerator
from studyflow.services.document_service import DocumentService
from studyflow.services.embedding_service import EmbeddingService
from studyflow.services.enrichment_service import WebEnrichmentService
from studyflow.services.scheduler import SpacedRepetitionScheduler
from studyflow.services.session_builder import SessionBuilder
from studyflow.services.similarity_index import SimilarityIndex
from studyflow.services.study_session_service import StudySessionService
from studyflow.utils.logging import get_logger

logger = get_logger(__name__)


def build_components(
    settings: Settings,
    llm_provider: ILLMProvider,
    search_provider: IWebSearchProvider,
    text_source: ITextSource | None = None,
    embedding_provider: IEmbeddingProvider | None = None,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Construct and return all StudyFlow services with injected dependencies.

    Parameters
    ----------
    settings:
        Resolved application settings.
    llm_provider:
        Backend for concept extraction.
    search_provider:
        Backend for web enrichment.
    text_source:
        Source of extracted document text.  Defaults to an empty
        :class:`InMemoryTextSource`.
    embedding_provider:
        Defaults to :class:`HashEmbeddingProvider` with the configured
        dimension.
    rng:
        Random source for session shuffling.

    Returns
    -------
    dict
        Service instances keyed by role name.
    """
    text_source = text_source or InMemoryTextSource()
    embedding_provider = embedding_provider or HashEmbeddingProvider(
        dimension=settings.embedding_dimension
    )

    repository = InMemoryDocumentRepository()
    index = SimilarityIndex()
    cache = MemoryCacheProvider(max_size=settings.query_cache_size, ttl=settings.query_cache_ttl)

    chunker = SectionChunker(
        min_chunk_size=settings.min_chunk_size,
        max_chunk_size=settings.max_chunk_size,
    )
    embedding_service = EmbeddingService(
        provider=embedding_provider,
        index=index,
        cache=cache,
        concurrency=settings.embedding_concurrency,
    )
    content_generator = StudyContentGenerator(
        llm_provider=llm_provider,
        max_prompt_chars=settings.concept_prompt_max_chars,
    )
    enrichment_service = WebEnrichmentService(
        search_provider=search_provider,
        max_concepts=settings.enrichment_max_concepts,
        max_topics=settings.enrichment_max_topics,
        results_per_query=settings.enrichment_results_per_query,
    )
    pipeline = StudyFlowPipeline(
        text_source=text_source,
        chunker=chunker,
        embedding_service=embedding_service,
        content_generator=content_generator,
        enrichment_service=enrichment_service,
        document_repository=repository,
    )

    scheduler = SpacedRepetitionScheduler()
    session_builder = SessionBuilder(scheduler=scheduler, rng=rng)
    study_sessions = StudySessionService(
        builder=session_builder,
        scheduler=scheduler,
        default_session_size=settings.default_session_size,
    )

    logger.info(
        "components_built",
        embedding_provider=embedding_provider.get_provider_name(),
        llm_provider=llm_provider.get_provider_name(),
        search_provider=search_provider.get_provider_name(),
    )

    return {
        "settings": settings,
        "text_source": text_source,
        "repository": repository,
        "similarity_index": index,
        "chunker": chunker,
        "embedding_service": embedding_service,
        "content_generator": content_generator,
        "enrichment_service": enrichment_service,
        "pipeline": pipeline,
        "progress_tracker": ProgressTracker(),
        "document_service": DocumentService(repository=repository, index=index),
        "scheduler": scheduler,
        "session_builder": session_builder,
        "study_sessions": study_sessions,
    }
