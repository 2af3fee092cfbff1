"""Chunk embedding and similarity search on top of an embedding provider.

Embedding a document fans its chunks out to the
:class:`~studyflow.interfaces.embedding_provider.IEmbeddingProvider` in
batches, at most ``concurrency`` batches in flight, and joins before
anything is written.  Vectors are attached to the chunk objects and the
document's :class:`~studyflow.services.similarity_index.SimilarityIndex`
entry is replaced only once every batch has succeeded.

Search queries are embedded through the same provider.  When a cache
provider is supplied, query vectors are cached under a key derived from the
provider name and a SHA-256 of the query text.
"""

from __future__ import annotations

import asyncio
import hashlib

import structlog

from studyflow.interfaces.cache_provider import ICacheProvider
from studyflow.interfaces.embedding_provider import IEmbeddingProvider
from studyflow.models.document import DocumentChunk, ScoredChunk
from studyflow.services.similarity_index import SimilarityIndex
from studyflow.utils.concurrency import first_exception, throttled_gather
from studyflow.utils.errors import EmbeddingError, InvalidInputError, StudyFlowError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_BATCH_SIZE = 16
_DEFAULT_CONCURRENCY = 4


class EmbeddingService:
    """Embeds document chunks and answers similarity searches.

    Parameters
    ----------
    provider:
        The embedding backend.
    index:
        The similarity index that receives embedded chunks.
    cache:
        Optional cache for query embeddings.
    concurrency:
        Maximum number of embedding batches in flight.
    batch_size:
        Number of chunk texts sent to the provider per call.
    """

    def __init__(
        self,
        provider: IEmbeddingProvider,
        index: SimilarityIndex,
        cache: ICacheProvider | None = None,
        concurrency: int = _DEFAULT_CONCURRENCY,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> None:
        if concurrency < 1 or batch_size < 1:
            raise InvalidInputError(
                message=(
                    f"concurrency and batch_size must be positive, "
                    f"got {concurrency} and {batch_size}"
                )
            )
        self._provider = provider
        self._index = index
        self._cache = cache
        self._concurrency = concurrency
        self._batch_size = batch_size

    @property
    def index(self) -> SimilarityIndex:
        return self._index

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    async def embed_chunks(
        self, document_id: str, chunks: list[DocumentChunk]
    ) -> list[DocumentChunk]:
        """Embed *chunks*, attach the vectors and replace the index entry.

        Raises
        ------
        EmbeddingError
            If any batch fails or the provider returns malformed vectors.
            Neither the chunks nor the index entry are modified in that case.
        """
        provider_name = self._provider.get_provider_name()
        logger.info(
            "chunk_embedding_started",
            document_id=document_id,
            chunks=len(chunks),
            provider=provider_name,
        )

        batches = [
            chunks[start : start + self._batch_size]
            for start in range(0, len(chunks), self._batch_size)
        ]
        semaphore = asyncio.Semaphore(self._concurrency)
        results = await throttled_gather(
            [self._provider.embed([c.content for c in batch]) for batch in batches],
            semaphore=semaphore,
            return_exceptions=True,
        )

        exc = first_exception(results)
        if isinstance(exc, asyncio.CancelledError):
            raise exc
        if exc is not None:
            logger.error(
                "chunk_embedding_failed",
                document_id=document_id,
                provider=provider_name,
                error=str(exc),
            )
            if isinstance(exc, EmbeddingError):
                raise exc
            raise EmbeddingError(
                message=f"Embedding provider failed: {exc}",
                provider_name=provider_name,
            ) from exc

        vectors: list[list[float]] = []
        for batch, batch_vectors in zip(batches, results):
            if len(batch_vectors) != len(batch):  # type: ignore[arg-type]
                raise EmbeddingError(
                    message=(
                        f"Provider returned {len(batch_vectors)} vectors "  # type: ignore[arg-type]
                        f"for {len(batch)} texts"
                    ),
                    provider_name=provider_name,
                )
            vectors.extend(batch_vectors)  # type: ignore[arg-type]

        dimensions = {len(v) for v in vectors}
        if len(dimensions) > 1 or 0 in dimensions:
            raise EmbeddingError(
                message=f"Provider returned inconsistent dimensions: {sorted(dimensions)}",
                provider_name=provider_name,
            )

        for chunk, vector in zip(chunks, vectors):
            chunk.embedding = [float(x) for x in vector]
        self._index.index(document_id, chunks)

        logger.info(
            "chunk_embedding_complete",
            document_id=document_id,
            chunks=len(chunks),
            dimension=next(iter(dimensions), None),
        )
        return chunks

    def remove_document(self, document_id: str) -> bool:
        return self._index.remove(document_id)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def embed_query(self, query: str) -> list[float]:
        """Embed *query*, serving repeated queries from the cache."""
        key = self._cache_key(query)
        if self._cache is not None:
            cached = await self._cache.get(key)
            if cached is not None:
                return cached

        try:
            vector = await self._provider.embed_single(query)
        except StudyFlowError:
            raise
        except Exception as exc:
            raise EmbeddingError(
                message=f"Query embedding failed: {exc}",
                provider_name=self._provider.get_provider_name(),
            ) from exc

        if self._cache is not None:
            await self._cache.set(key, vector)
        return vector

    async def search_similar(
        self, document_id: str, query: str, top_k: int = 5
    ) -> list[DocumentChunk]:
        """Return the *top_k* chunks of *document_id* most similar to *query*."""
        return [s.chunk for s in await self.search_scored(document_id, query, top_k)]

    async def search_scored(
        self, document_id: str, query: str, top_k: int = 5
    ) -> list[ScoredChunk]:
        """Like :meth:`search_similar` but includes similarity scores.

        An unindexed document returns an empty list without embedding the
        query.
        """
        if top_k < 1:
            raise InvalidInputError(message=f"top_k must be at least 1, got {top_k}")
        if not self._index.contains(document_id):
            return []

        query_vector = await self.embed_query(query)
        results = self._index.search(document_id, query_vector, top_k)
        logger.debug(
            "similarity_search",
            document_id=document_id,
            top_k=top_k,
            results=len(results),
        )
        return results

    def _cache_key(self, query: str) -> str:
        digest = hashlib.sha256(query.encode("utf-8")).hexdigest()
        return f"query_embedding:{self._provider.get_provider_name()}:{digest}"
