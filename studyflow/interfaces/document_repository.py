"""Abstract base class for document storage.

The pipeline writes documents back after success or failure, and the
document service registers, lists and deletes them.  Persistence design is
out of scope; the bundled implementation keeps documents in memory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from studyflow.models.document import Document


# Concrete implementation: InMemoryDocumentRepository (studyflow/providers/repository/)
class IDocumentRepository(ABC):
    """Contract for storing and retrieving :class:`Document` instances."""

    @abstractmethod
    async def get(self, document_id: str) -> Document | None:
        """Return the document with *document_id*, or ``None`` if unknown."""

    @abstractmethod
    async def put(self, document: Document) -> None:
        """Insert or replace *document*, keyed by its ``id``."""

    @abstractmethod
    async def delete(self, document_id: str) -> bool:
        """Remove the document; return ``True`` if it existed."""

    @abstractmethod
    async def list_all(self) -> list[Document]:
        """Return every stored document (order unspecified)."""
