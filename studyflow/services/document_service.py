"""Document registration, lookup and deletion.

Documents live behind an injected
:class:`~studyflow.interfaces.document_repository.IDocumentRepository`.
Deleting a document also destroys its similarity-index entry.
"""

from __future__ import annotations

import structlog

from studyflow.interfaces.document_repository import IDocumentRepository
from studyflow.models.document import Document, DocumentStatus
from studyflow.services.similarity_index import SimilarityIndex
from studyflow.utils.errors import DocumentNotFoundError, InvalidInputError

logger = structlog.get_logger(logger_name=__name__)


class DocumentService:
    """Manages the set of known documents."""

    def __init__(
        self,
        repository: IDocumentRepository,
        index: SimilarityIndex | None = None,
    ) -> None:
        self._repository = repository
        self._index = index

    async def register_document(
        self,
        file_name: str,
        file_size: int = 0,
        content_type: str = "text/plain",
    ) -> Document:
        """Create an UPLOADED document and store it."""
        if not file_name.strip():
            raise InvalidInputError(message="file_name must not be empty")
        document = Document(
            file_name=file_name,
            file_size=file_size,
            content_type=content_type,
            status=DocumentStatus.UPLOADED,
        )
        await self._repository.put(document)
        logger.info("document_registered", document_id=document.id, file_name=file_name)
        return document

    async def get_document(self, document_id: str) -> Document | None:
        return await self._repository.get(document_id)

    async def require_document(self, document_id: str) -> Document:
        """Like :meth:`get_document` but raises on a miss.

        Raises
        ------
        DocumentNotFoundError
            If *document_id* is unknown.
        """
        document = await self._repository.get(document_id)
        if document is None:
            raise DocumentNotFoundError(message=f"Document {document_id} not found")
        return document

    async def list_documents(self) -> list[Document]:
        """Return all documents, most recently uploaded first."""
        documents = await self._repository.list_all()
        return sorted(documents, key=lambda d: d.uploaded_at, reverse=True)

    async def delete_document(self, document_id: str) -> bool:
        """Delete the document and its index entry; return ``True`` if it existed."""
        removed = await self._repository.delete(document_id)
        if self._index is not None:
            self._index.remove(document_id)
        if removed:
            logger.info("document_deleted", document_id=document_id)
        return removed
