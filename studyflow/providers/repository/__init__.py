"""Document repository implementations."""

from studyflow.providers.repository.memory_document_repository import (
    InMemoryDocumentRepository,
)

__all__ = ["InMemoryDocumentRepository"]
