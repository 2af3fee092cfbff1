"""Central orchestrator for the document-to-study pipeline.

Sequences text loading, chunking, embedding, concept extraction, study item
generation and web enrichment for one document, advancing
``Document.status`` through its state machine and reporting a progress
checkpoint before each step:

    UPLOADED → PROCESSING → CHUNKING → EMBEDDING → GENERATING_CONTENT →
    ENRICHING → COMPLETED

Any step failure moves the document to FAILED, records the error message,
detaches any study content, saves the document and raises
:class:`PipelineError` with the step's exception as ``__cause__``.  There
are no retries and no resume: a rerun starts over.  New chunks replace
``Document.chunks`` only once they are embedded and indexed, so a failed
rerun leaves the document owning the chunks its index entry references.

Cancellation is cooperative.  A set ``cancel_event`` is honoured before
the next step starts, and host cancellation of the awaiting task is
observed at the current await.  Either way the document keeps its last
non-terminal status and is never marked COMPLETED.
"""

from __future__ import annotations

import asyncio

import structlog

from studyflow.interfaces.content_generator import IStudyContentGenerator
from studyflow.interfaces.document_repository import IDocumentRepository
from studyflow.interfaces.enrichment_service import IEnrichmentService
from studyflow.interfaces.progress_sink import ProgressSink
from studyflow.interfaces.text_source import ITextSource
from studyflow.models.document import Document, DocumentStatus
from studyflow.models.study import StudyContent
from studyflow.services.chunker import SectionChunker
from studyflow.services.embedding_service import EmbeddingService
from studyflow.utils.errors import (
    InvalidInputError,
    PipelineCancelledError,
    PipelineError,
)
from studyflow.utils.logging import get_logger

_CANCELLED_MESSAGE = "Processing was cancelled"


class StudyFlowPipeline:
    """Turns one document into chunks, an index entry and study content.

    All collaborators are injected at construction time.  The
    ``document_repository`` is optional; without one the caller keeps the
    only reference to the processed document.
    """

    def __init__(
        self,
        text_source: ITextSource,
        chunker: SectionChunker,
        embedding_service: EmbeddingService,
        content_generator: IStudyContentGenerator,
        enrichment_service: IEnrichmentService,
        document_repository: IDocumentRepository | None = None,
    ) -> None:
        self._text_source = text_source
        self._chunker = chunker
        self._embedding_service = embedding_service
        self._content_generator = content_generator
        self._enrichment_service = enrichment_service
        self._repository = document_repository
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def process_document(
        self,
        document: Document,
        progress: ProgressSink | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> StudyContent:
        """Run every pipeline step for *document*.

        Parameters
        ----------
        document:
            The document to process.  Its status, chunks, error message and
            study content are updated in place.
        progress:
            Optional ``(message, percent)`` sink, sync or async.  Sink
            failures are logged and otherwise ignored.
        cancel_event:
            Optional event; once set, the run stops before its next step.

        Returns
        -------
        StudyContent
            The study content now attached to the document.

        Raises
        ------
        PipelineError
            If any step fails; the step's exception is the ``__cause__``.
        PipelineCancelledError
            If *cancel_event* was set before a step started.
        asyncio.CancelledError
            If the awaiting task was cancelled.
        """
        document_id = document.id
        document.error_message = None
        step = "prepare"
        self._logger.info("pipeline_start", document_id=document_id, file_name=document.file_name)

        try:
            step = "prepare"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.PROCESSING, 10, "Preparing document...",
            )

            step = "load_text"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.PROCESSING, 20, "Loading extracted text...",
            )
            text = await self._text_source.get_text(document_id)
            if not text or not text.strip():
                raise InvalidInputError(message="No text could be extracted from the document")

            step = "chunking"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.CHUNKING, 30, "Chunking document...",
            )
            chunks = self._chunker.chunk(text, document_id)
            self._logger.info("pipeline_chunking_complete", document_id=document_id, chunks=len(chunks))

            step = "embedding"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.EMBEDDING, 40, "Generating embeddings...",
            )
            await self._embedding_service.embed_chunks(document_id, chunks)
            document.chunks = chunks

            step = "concepts"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.GENERATING_CONTENT, 50, "Extracting key concepts...",
            )
            concepts = await self._content_generator.extract_concepts(text)

            step = "flashcards"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.GENERATING_CONTENT, 60, "Generating flashcards...",
            )
            flashcards = await self._content_generator.generate_flashcards(concepts, text)

            step = "multiple_choice"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.GENERATING_CONTENT, 70, "Creating multiple choice questions...",
            )
            mcqs = await self._content_generator.generate_multiple_choice(concepts, text)

            step = "short_answer"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.GENERATING_CONTENT, 80, "Generating practice questions...",
            )
            short_answers = await self._content_generator.generate_short_answer(concepts, text)

            step = "enrichment"
            await self._begin_step(
                document, progress, cancel_event,
                DocumentStatus.ENRICHING, 90, "Enriching with web knowledge...",
            )
            queries = self._enrichment_service.generate_search_queries(concepts)
            enriched = await self._enrichment_service.enrich(queries)

            step = "assemble"
            self._check_cancelled(cancel_event)
            content = StudyContent(
                document_id=document_id,
                concepts=concepts,
                flashcards=flashcards,
                multiple_choice_questions=mcqs,
                short_answer_questions=short_answers,
                enriched_knowledge=enriched,
            )
            step = "save"
            document.study_content = content
            document.status = DocumentStatus.COMPLETED
            if self._repository is not None:
                try:
                    await self._repository.put(document)
                except BaseException:
                    # Only a saved document counts as completed.
                    document.status = DocumentStatus.ENRICHING
                    document.study_content = None
                    raise

        except (PipelineCancelledError, asyncio.CancelledError):
            document.error_message = _CANCELLED_MESSAGE
            self._logger.warning(
                "pipeline_cancelled",
                document_id=document_id,
                step=step,
                status=document.status.value,
            )
            raise
        except Exception as exc:
            document.status = DocumentStatus.FAILED
            document.error_message = str(exc)
            document.study_content = None
            self._logger.error(
                "pipeline_failed",
                document_id=document_id,
                step=step,
                error=str(exc),
            )
            await self._save_failed(document)
            raise PipelineError(message=f"Pipeline step '{step}' failed: {exc}") from exc

        await self._report(progress, "Complete!", 100)
        self._logger.info(
            "pipeline_complete",
            document_id=document_id,
            chunks=len(document.chunks),
            concepts=len(content.concepts),
            flashcards=len(content.flashcards),
            multiple_choice=len(content.multiple_choice_questions),
            short_answer=len(content.short_answer_questions),
            enriched=len(content.enriched_knowledge),
        )
        return content

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _begin_step(
        self,
        document: Document,
        progress: ProgressSink | None,
        cancel_event: asyncio.Event | None,
        status: DocumentStatus,
        percent: int,
        message: str,
    ) -> None:
        self._check_cancelled(cancel_event)
        document.status = status
        await self._report(progress, message, percent)

    @staticmethod
    def _check_cancelled(cancel_event: asyncio.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise PipelineCancelledError(message=_CANCELLED_MESSAGE)

    async def _report(self, progress: ProgressSink | None, message: str, percent: int) -> None:
        """Deliver a checkpoint to the sink; sink failures never fail the run."""
        if progress is None:
            return
        try:
            result = progress(message, percent)
            if asyncio.iscoroutine(result):
                await result
        except Exception as exc:
            self._logger.warning(
                "progress_sink_error",
                percent=percent,
                error=str(exc),
            )

    async def _save_failed(self, document: Document) -> None:
        if self._repository is None:
            return
        try:
            await self._repository.put(document)
        except Exception as exc:
            self._logger.error(
                "failed_document_save_error",
                document_id=document.id,
                error=str(exc),
            )
