"""Unit tests for the composition root in studyflow/main.py."""

from __future__ import annotations

import random

import pytest

from studyflow.config.settings import Settings
from studyflow.main import build_components
from studyflow.models.document import DocumentStatus
from studyflow.pipeline.orchestrator import StudyFlowPipeline
from studyflow.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from studyflow.providers.text.memory_text_source import InMemoryTextSource


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(**overrides) -> Settings:
    """Build a Settings instance with small test-friendly defaults."""
    defaults = {
        "min_chunk_size": 100,
        "max_chunk_size": 400,
        "embedding_dimension": 16,
        "default_session_size": 6,
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestBuildComponents:
    def test_all_roles_present(self, mock_llm_provider, mock_search_provider) -> None:
        components = build_components(_settings(), mock_llm_provider, mock_search_provider)

        assert set(components) == {
            "settings",
            "text_source",
            "repository",
            "similarity_index",
            "chunker",
            "embedding_service",
            "content_generator",
            "enrichment_service",
            "pipeline",
            "progress_tracker",
            "document_service",
            "scheduler",
            "session_builder",
            "study_sessions",
        }
        assert isinstance(components["pipeline"], StudyFlowPipeline)

    def test_settings_applied(self, mock_llm_provider, mock_search_provider) -> None:
        components = build_components(_settings(), mock_llm_provider, mock_search_provider)

        assert components["chunker"].min_chunk_size == 100
        assert components["chunker"].max_chunk_size == 400
        assert components["embedding_service"].index is components["similarity_index"]

    def test_injected_collaborators_used(self, mock_llm_provider, mock_search_provider) -> None:
        text_source = InMemoryTextSource()
        embedder = HashEmbeddingProvider(dimension=8)

        components = build_components(
            _settings(),
            mock_llm_provider,
            mock_search_provider,
            text_source=text_source,
            embedding_provider=embedder,
        )

        assert components["text_source"] is text_source


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_register_process_and_study(
        self, mock_llm_provider, mock_search_provider, sample_study_text
    ) -> None:
        components = build_components(
            _settings(),
            mock_llm_provider,
            mock_search_provider,
            rng=random.Random(0),
        )
        document = await components["document_service"].register_document("biology.md")
        components["text_source"].add_text(document.id, sample_study_text)
        tracker = components["progress_tracker"]

        content = await components["pipeline"].process_document(
            document, progress=tracker.sink_for(document.id)
        )

        stored = await components["document_service"].require_document(document.id)
        assert stored.status is DocumentStatus.COMPLETED
        assert stored.study_content is content
        assert tracker.get_progress(document.id).percent_complete == 100

        hits = await components["embedding_service"].search_similar(
            document.id, document.chunks[0].content, top_k=1
        )
        assert hits[0] is document.chunks[0]

        session = components["study_sessions"].start_session(content)
        assert len(session.items) == 6
