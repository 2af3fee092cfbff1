"""Document and chunk models.

A :class:`Document` exclusively owns its :class:`DocumentChunk` list and its
:class:`~studyflow.models.study.StudyContent`.  Both models are mutable: the
pipeline orchestrator advances ``Document.status`` step by step, and the
embedding service attaches vectors to the very chunk objects the document
owns (the similarity index references those same objects).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from studyflow.models.study import StudyContent


# ---------------------------------------------------------------------------
# DocumentStatus: the state machine driven by the pipeline orchestrator.
# ---------------------------------------------------------------------------
class DocumentStatus(str, Enum):  # noqa: UP042
    """Processing status of a document.

    UPLOADED → PROCESSING → CHUNKING → EMBEDDING → GENERATING_CONTENT →
    ENRICHING → COMPLETED, with any step able to move to FAILED.
    """

    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    CHUNKING = "CHUNKING"
    EMBEDDING = "EMBEDDING"
    GENERATING_CONTENT = "GENERATING_CONTENT"
    ENRICHING = "ENRICHING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.COMPLETED, DocumentStatus.FAILED)


# ---------------------------------------------------------------------------
# DocumentChunk: the unit of retrieval.
# ---------------------------------------------------------------------------
class DocumentChunk(BaseModel):
    """A bounded span of a document's text, optionally tagged with a heading.

    Chunks are created by :class:`~studyflow.services.chunker.SectionChunker`.
    ``start_offset``/``end_offset`` are a running cursor over the emitted
    chunk contents, not positions in the original source text.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    document_id: str = ""
    index: int = Field(ge=0, description="Sequence order, 0-based and contiguous per document.")
    content: str = Field(min_length=1)
    start_offset: int = Field(default=0, ge=0)
    end_offset: int = Field(default=1, ge=1)
    page_number: int = Field(default=0, ge=0, description="0 means unknown.")
    heading: str | None = None
    embedding: list[float] | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_offsets(self) -> DocumentChunk:
        if self.end_offset <= self.start_offset:
            raise ValueError("end_offset must be greater than start_offset")
        return self


class ScoredChunk(BaseModel):
    """A chunk returned from a similarity query with its cosine similarity."""

    model_config = ConfigDict(frozen=True)

    chunk: DocumentChunk
    similarity: float = Field(description="Cosine similarity in [-1, 1].")


# ---------------------------------------------------------------------------
# Document: an uploaded source and everything derived from it.
# ---------------------------------------------------------------------------
class Document(BaseModel):
    """An uploaded document moving through the study pipeline."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    file_name: str = ""
    file_size: int = Field(default=0, ge=0)
    content_type: str = "text/plain"
    uploaded_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
    status: DocumentStatus = DocumentStatus.UPLOADED
    error_message: str | None = None

    chunks: list[DocumentChunk] = Field(default_factory=list)
    study_content: StudyContent | None = None
