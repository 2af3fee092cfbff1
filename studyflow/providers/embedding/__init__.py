"""Embedding provider implementations.

HashEmbeddingProvider derives a deterministic unit vector from each text.
It carries no semantic meaning and exists for development, demos and
tests; production deployments inject a real IEmbeddingProvider.
"""

from studyflow.providers.embedding.hash_embedding_provider import HashEmbeddingProvider

__all__ = ["HashEmbeddingProvider"]
