"""In-memory document repository.

Documents are stored by reference, so the pipeline's in-place updates are
visible to every holder of the same :class:`Document` instance.
"""

from __future__ import annotations

import structlog

from studyflow.interfaces.document_repository import IDocumentRepository
from studyflow.models.document import Document

logger = structlog.get_logger(logger_name=__name__)


class InMemoryDocumentRepository(IDocumentRepository):
    """Dict-backed :class:`IDocumentRepository`."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    async def get(self, document_id: str) -> Document | None:
        return self._documents.get(document_id)

    async def put(self, document: Document) -> None:
        self._documents[document.id] = document
        logger.debug("document_saved", document_id=document.id, status=document.status.value)

    async def delete(self, document_id: str) -> bool:
        removed = self._documents.pop(document_id, None) is not None
        if removed:
            logger.debug("document_deleted", document_id=document_id)
        return removed

    async def list_all(self) -> list[Document]:
        return list(self._documents.values())
