"""Abstract base class for extracted-text sources.

Text extraction from PDF, DOCX and other binary formats happens outside
StudyFlow.  The pipeline only asks an :class:`ITextSource` for the plain
text that was already extracted for a document.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: InMemoryTextSource (studyflow/providers/text/)
class ITextSource(ABC):
    """Contract for retrieving a document's extracted plain text."""

    @abstractmethod
    async def get_text(self, document_id: str) -> str:
        """Return the extracted text for *document_id*.

        Parameters
        ----------
        document_id:
            Identifier of the document whose text is requested.

        Returns
        -------
        str
            The extracted plain text.  May be empty; the pipeline treats
            empty text as invalid input.

        Raises
        ------
        studyflow.utils.errors.TextNotAvailableError
            If no extracted text exists for the document.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this text source."""
