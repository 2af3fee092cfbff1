"""Deterministic embedding provider for development and tests.

Seeds a numpy random generator from the SHA-256 digest of each text and
draws a normal vector, then L2-normalises it.  Identical texts always map
to identical vectors; different texts map to (almost surely) different
ones.  No network access, no model weights.
"""

from __future__ import annotations

import hashlib

import numpy as np
import structlog

from studyflow.interfaces.embedding_provider import IEmbeddingProvider
from studyflow.utils.errors import InvalidInputError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DIMENSION = 1536


class HashEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider producing seeded pseudo-random unit vectors."""

    def __init__(self, dimension: int = _DEFAULT_DIMENSION) -> None:
        if dimension < 1:
            raise InvalidInputError(
                message=f"Embedding dimension must be positive, got {dimension}",
                provider_name=self.get_provider_name(),
            )
        self._dimension = dimension

    def _vector(self, text: str) -> list[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        rng = np.random.default_rng(int.from_bytes(digest[:8], "big"))
        vec = rng.standard_normal(self._dimension)
        norm = np.linalg.norm(vec)
        if norm > 0:
            vec = vec / norm
        return vec.tolist()

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts."""
        if not texts:
            return []
        vectors = [self._vector(text) for text in texts]
        logger.debug("hash_embeddings_generated", count=len(vectors), dimension=self._dimension)
        return vectors

    async def embed_single(self, text: str) -> list[float]:
        return self._vector(text)

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "hash-embedding"

    def is_available(self) -> bool:
        return True
