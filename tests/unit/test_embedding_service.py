"""Unit tests for EmbeddingService batching, indexing and search."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from studyflow.interfaces.embedding_provider import IEmbeddingProvider
from studyflow.models.document import DocumentChunk
from studyflow.providers.cache.memory_cache import MemoryCacheProvider
from studyflow.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from studyflow.services.embedding_service import EmbeddingService
from studyflow.services.similarity_index import SimilarityIndex
from studyflow.utils.errors import EmbeddingError, InvalidInputError


def _chunks(count: int, document_id: str = "doc") -> list[DocumentChunk]:
    return [
        DocumentChunk(
            id=f"{document_id}-{i}",
            document_id=document_id,
            index=i,
            content=f"Chunk number {i} talks about topic {i}.",
            start_offset=i * 100,
            end_offset=i * 100 + 50,
        )
        for i in range(count)
    ]


def _mock_provider(**overrides) -> MagicMock:
    mock = MagicMock(spec=IEmbeddingProvider)
    mock.get_provider_name.return_value = "mock-embed"
    mock.get_dimension.return_value = 2
    for name, value in overrides.items():
        setattr(mock, name, value)
    return mock


class _TrackingProvider(IEmbeddingProvider):
    """Records the peak number of concurrent ``embed`` calls."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.peak = 0
        self.calls = 0

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls += 1
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        return [[1.0, float(len(t))] for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        return [1.0, 0.0]

    def get_dimension(self) -> int:
        return 2

    def get_provider_name(self) -> str:
        return "tracking"

    def is_available(self) -> bool:
        return True


class TestConstruction:
    @pytest.mark.parametrize("kwargs", [{"concurrency": 0}, {"batch_size": 0}])
    def test_non_positive_settings_rejected(self, kwargs) -> None:
        with pytest.raises(InvalidInputError):
            EmbeddingService(HashEmbeddingProvider(8), SimilarityIndex(), **kwargs)


class TestEmbedChunks:
    @pytest.mark.asyncio
    async def test_attaches_embeddings_and_indexes(self) -> None:
        index = SimilarityIndex()
        service = EmbeddingService(HashEmbeddingProvider(16), index, batch_size=2)
        chunks = _chunks(5)

        result = await service.embed_chunks("doc", chunks)

        assert result is chunks
        assert all(c.embedding is not None and len(c.embedding) == 16 for c in chunks)
        assert index.contains("doc")
        assert index.dimension("doc") == 16
        assert service.index is index

    @pytest.mark.asyncio
    async def test_batches_respect_concurrency(self) -> None:
        provider = _TrackingProvider()
        service = EmbeddingService(provider, SimilarityIndex(), concurrency=2, batch_size=1)

        await service.embed_chunks("doc", _chunks(6))

        assert provider.calls == 6
        assert provider.peak <= 2

    @pytest.mark.asyncio
    async def test_vectors_follow_chunk_order(self) -> None:
        provider = _TrackingProvider()
        service = EmbeddingService(provider, SimilarityIndex(), batch_size=2)
        chunks = _chunks(4)

        await service.embed_chunks("doc", chunks)

        assert [c.embedding for c in chunks] == [[1.0, float(len(c.content))] for c in chunks]

    @pytest.mark.asyncio
    async def test_empty_chunk_list(self) -> None:
        index = SimilarityIndex()
        service = EmbeddingService(HashEmbeddingProvider(8), index)

        assert await service.embed_chunks("doc", []) == []
        assert index.contains("doc")

    @pytest.mark.asyncio
    async def test_provider_failure_leaves_state_untouched(self) -> None:
        index = SimilarityIndex()
        good = EmbeddingService(HashEmbeddingProvider(8), index)
        await good.embed_chunks("doc", _chunks(2))
        previous_ids = [c.id for c in index.query("doc", [1.0] * 8, top_k=10)]

        failing = EmbeddingService(
            _mock_provider(embed=AsyncMock(side_effect=RuntimeError("boom"))), index
        )
        new_chunks = _chunks(3)

        with pytest.raises(EmbeddingError) as exc_info:
            await failing.embed_chunks("doc", new_chunks)

        assert exc_info.value.provider_name == "mock-embed"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert all(c.embedding is None for c in new_chunks)
        assert [c.id for c in index.query("doc", [1.0] * 8, top_k=10)] == previous_ids

    @pytest.mark.asyncio
    async def test_embedding_error_passes_through(self) -> None:
        original = EmbeddingError(message="quota exceeded", provider_name="mock-embed")
        service = EmbeddingService(
            _mock_provider(embed=AsyncMock(side_effect=original)), SimilarityIndex()
        )

        with pytest.raises(EmbeddingError) as exc_info:
            await service.embed_chunks("doc", _chunks(1))
        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_wrong_vector_count(self) -> None:
        index = SimilarityIndex()
        service = EmbeddingService(
            _mock_provider(embed=AsyncMock(return_value=[[1.0, 0.0]])), index
        )

        with pytest.raises(EmbeddingError):
            await service.embed_chunks("doc", _chunks(3))
        assert not index.contains("doc")

    @pytest.mark.asyncio
    async def test_inconsistent_dimensions(self) -> None:
        service = EmbeddingService(
            _mock_provider(embed=AsyncMock(return_value=[[1.0, 0.0], [1.0, 0.0, 0.0]])),
            SimilarityIndex(),
        )

        with pytest.raises(EmbeddingError):
            await service.embed_chunks("doc", _chunks(2))

    @pytest.mark.asyncio
    async def test_empty_vectors_rejected(self) -> None:
        service = EmbeddingService(
            _mock_provider(embed=AsyncMock(return_value=[[], []])), SimilarityIndex()
        )

        with pytest.raises(EmbeddingError):
            await service.embed_chunks("doc", _chunks(2))

    @pytest.mark.asyncio
    async def test_remove_document(self) -> None:
        service = EmbeddingService(HashEmbeddingProvider(8), SimilarityIndex())
        await service.embed_chunks("doc", _chunks(2))

        assert service.remove_document("doc") is True
        assert service.remove_document("doc") is False


class TestSearch:
    @pytest.mark.asyncio
    async def test_identical_text_ranks_first(self) -> None:
        service = EmbeddingService(HashEmbeddingProvider(64), SimilarityIndex())
        chunks = _chunks(5)
        await service.embed_chunks("doc", chunks)

        results = await service.search_scored("doc", chunks[3].content, top_k=2)

        assert results[0].chunk is chunks[3]
        assert results[0].similarity == pytest.approx(1.0)
        assert len(results) == 2

    @pytest.mark.asyncio
    async def test_search_similar_returns_chunks(self) -> None:
        service = EmbeddingService(HashEmbeddingProvider(64), SimilarityIndex())
        chunks = _chunks(3)
        await service.embed_chunks("doc", chunks)

        found = await service.search_similar("doc", chunks[1].content, top_k=1)

        assert found == [chunks[1]]

    @pytest.mark.asyncio
    async def test_unindexed_document_skips_embedding(self) -> None:
        provider = _mock_provider(embed_single=AsyncMock(return_value=[1.0, 0.0]))
        service = EmbeddingService(provider, SimilarityIndex())

        assert await service.search_similar("missing", "anything") == []
        provider.embed_single.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_top_k(self) -> None:
        service = EmbeddingService(HashEmbeddingProvider(8), SimilarityIndex())

        with pytest.raises(InvalidInputError):
            await service.search_similar("doc", "query", top_k=0)

    @pytest.mark.asyncio
    async def test_query_embeddings_are_cached(self) -> None:
        provider = _mock_provider(
            embed=AsyncMock(return_value=[[1.0, 0.0], [0.0, 1.0]]),
            embed_single=AsyncMock(return_value=[1.0, 0.0]),
        )
        cache = MemoryCacheProvider(max_size=8, ttl=60)
        service = EmbeddingService(provider, SimilarityIndex(), cache=cache)
        await service.embed_chunks("doc", _chunks(2))

        first = await service.search_similar("doc", "photosynthesis", top_k=1)
        second = await service.search_similar("doc", "photosynthesis", top_k=1)

        assert first == second
        assert first[0].index == 0
        provider.embed_single.assert_awaited_once_with("photosynthesis")
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_query_failure_wrapped(self) -> None:
        provider = _mock_provider(
            embed=AsyncMock(return_value=[[1.0, 0.0]]),
            embed_single=AsyncMock(side_effect=ConnectionError("offline")),
        )
        service = EmbeddingService(provider, SimilarityIndex())
        await service.embed_chunks("doc", _chunks(1))

        with pytest.raises(EmbeddingError):
            await service.search_similar("doc", "query")
