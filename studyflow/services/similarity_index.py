"""In-memory cosine-similarity index over embedded document chunks.

Each document id maps to one entry: the document's chunks in index order
(the same objects the :class:`~studyflow.models.document.Document` owns) and
a row-normalised numpy matrix of their embeddings.  The matrix is derived
from the chunks when the entry is written and never updated separately.

Entries are replaced wholesale by :meth:`SimilarityIndex.index`.  Readers
never observe a partially written entry: validation and matrix construction
finish before the entry is swapped in.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog

from studyflow.models.document import DocumentChunk, ScoredChunk
from studyflow.utils.errors import InvalidInputError

logger = structlog.get_logger(logger_name=__name__)


@dataclass(frozen=True)
class _IndexEntry:
    chunks: tuple[DocumentChunk, ...]
    matrix: np.ndarray
    positions: np.ndarray

    @property
    def dimension(self) -> int | None:
        return int(self.matrix.shape[1]) if self.chunks else None


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """L2-normalise each row; all-zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    safe = np.where(norms == 0.0, 1.0, norms)
    return matrix / safe


class SimilarityIndex:
    """Per-document nearest-neighbour lookup by cosine similarity."""

    def __init__(self) -> None:
        self._entries: dict[str, _IndexEntry] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def index(self, document_id: str, chunks: list[DocumentChunk]) -> None:
        """Replace the entry for *document_id* with *chunks*.

        Every chunk must carry an embedding and all embeddings must share
        one dimensionality.  On rejection the previous entry is untouched.

        Raises
        ------
        InvalidInputError
            If a chunk has no embedding or the dimensionalities differ.
        """
        ordered = sorted(chunks, key=lambda c: c.index)

        if not ordered:
            self._entries[document_id] = _IndexEntry(
                chunks=(),
                matrix=np.zeros((0, 0), dtype=np.float64),
                positions=np.zeros(0, dtype=np.int64),
            )
            logger.debug("index_replaced", document_id=document_id, chunks=0)
            return

        missing = [c.index for c in ordered if not c.embedding]
        if missing:
            raise InvalidInputError(
                message=f"Chunks without embeddings cannot be indexed: {missing}"
            )

        dimensions = {len(c.embedding) for c in ordered}  # type: ignore[arg-type]
        if len(dimensions) != 1:
            raise InvalidInputError(
                message=f"Chunk embeddings have mixed dimensions: {sorted(dimensions)}"
            )

        matrix = np.asarray([c.embedding for c in ordered], dtype=np.float64)
        self._entries[document_id] = _IndexEntry(
            chunks=tuple(ordered),
            matrix=_normalize_rows(matrix),
            positions=np.asarray([c.index for c in ordered], dtype=np.int64),
        )
        logger.debug(
            "index_replaced",
            document_id=document_id,
            chunks=len(ordered),
            dimension=matrix.shape[1],
        )

    def remove(self, document_id: str) -> bool:
        """Drop the entry for *document_id*; return ``True`` if one existed."""
        removed = self._entries.pop(document_id, None) is not None
        if removed:
            logger.debug("index_removed", document_id=document_id)
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def contains(self, document_id: str) -> bool:
        return document_id in self._entries

    def dimension(self, document_id: str) -> int | None:
        """Return the embedding dimensionality of an entry.

        ``None`` when the document is not indexed or its entry is empty.
        """
        entry = self._entries.get(document_id)
        return entry.dimension if entry is not None else None

    def search(
        self,
        document_id: str,
        query_embedding: list[float],
        top_k: int = 5,
    ) -> list[ScoredChunk]:
        """Return up to *top_k* chunks with their cosine similarity.

        Results are ordered by descending similarity; equal similarities
        are ordered by ascending chunk index.  An unindexed document yields
        an empty list.

        Raises
        ------
        InvalidInputError
            If ``top_k < 1`` or the query length differs from the entry's
            dimensionality.
        """
        if top_k < 1:
            raise InvalidInputError(message=f"top_k must be at least 1, got {top_k}")

        entry = self._entries.get(document_id)
        if entry is None or not entry.chunks:
            return []

        query = np.asarray(query_embedding, dtype=np.float64)
        if query.ndim != 1 or query.shape[0] != entry.dimension:
            raise InvalidInputError(
                message=(
                    f"Query embedding has dimension {query.size}, "
                    f"index expects {entry.dimension}"
                )
            )

        norm = np.linalg.norm(query)
        if norm > 0.0:
            query = query / norm
        scores = entry.matrix @ query

        # lexsort: last key is primary.
        order = np.lexsort((entry.positions, -scores))[:top_k]
        return [
            ScoredChunk(chunk=entry.chunks[i], similarity=float(scores[i]))
            for i in order
        ]

    def query(
        self,
        document_id: str,
        query_embedding: list[float],
        top_k: int = 5,
    ) -> list[DocumentChunk]:
        """Like :meth:`search` but returns only the chunks."""
        return [scored.chunk for scored in self.search(document_id, query_embedding, top_k)]

    def __len__(self) -> int:
        return len(self._entries)
