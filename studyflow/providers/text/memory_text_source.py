"""In-memory text source.

Holds already-extracted document text keyed by document id.  Used by the
CLI, by tests and by any host that performs extraction itself and hands
StudyFlow the result.
"""

from __future__ import annotations

import structlog

from studyflow.interfaces.text_source import ITextSource
from studyflow.utils.errors import TextNotAvailableError

logger = structlog.get_logger(logger_name=__name__)


class InMemoryTextSource(ITextSource):
    """Dict-backed :class:`ITextSource`."""

    def __init__(self, texts: dict[str, str] | None = None) -> None:
        self._texts: dict[str, str] = dict(texts or {})

    def add_text(self, document_id: str, text: str) -> None:
        self._texts[document_id] = text

    def remove_text(self, document_id: str) -> None:
        self._texts.pop(document_id, None)

    async def get_text(self, document_id: str) -> str:
        try:
            text = self._texts[document_id]
        except KeyError:
            raise TextNotAvailableError(
                message=f"No extracted text for document {document_id}",
                provider_name=self.get_provider_name(),
            ) from None
        logger.debug("text_loaded", document_id=document_id, length=len(text))
        return text

    def get_provider_name(self) -> str:
        return "memory-text"
