"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text.
Implementations may wrap a hosted embedding API, a local model, or the
deterministic :class:`~studyflow.providers.embedding.hash_embedding_provider.HashEmbeddingProvider`
used in development and tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: HashEmbeddingProvider (studyflow/providers/embedding/)
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the similarity index.

    Embeddings are consumed by
    :class:`~studyflow.services.embedding_service.EmbeddingService` for
    indexing chunks and for query-time similarity search.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.  Each
            inner list has length equal to :meth:`get_dimension`.

        Raises
        ------
        studyflow.utils.errors.EmbeddingError
            If the embedding call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Parameters
        ----------
        text:
            The text string to embed.

        Returns
        -------
        list[float]
            The embedding vector with length equal to :meth:`get_dimension`.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        This value must remain constant for the lifetime of the provider.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and reachable."""
