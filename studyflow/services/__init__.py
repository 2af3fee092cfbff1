"""Core StudyFlow services.

- **chunker** -- heading-aware, size-bounded text chunking.
- **similarity_index** -- per-document cosine-similarity lookup.
- **embedding_service** -- chunk embedding fan-out and query search.
- **scheduler** -- SM-2 flashcard scheduling.
- **session_builder** -- interleaved study-session assembly.
- **study_session_service** -- session lifecycle and statistics.
- **content_generator** -- concept extraction and templated study items.
- **enrichment_service** -- web-search enrichment of concepts.
- **document_service** -- document registration, listing and deletion.
"""

from studyflow.services.chunker import SectionChunker
from studyflow.services.content_generator import StudyContentGenerator
from studyflow.services.document_service import DocumentService
from studyflow.services.embedding_service import EmbeddingService
from studyflow.services.enrichment_service import WebEnrichmentService
from studyflow.services.scheduler import SpacedRepetitionScheduler
from studyflow.services.session_builder import SessionBuilder
from studyflow.services.similarity_index import SimilarityIndex
from studyflow.services.study_session_service import StudySessionService

__all__ = [
    "DocumentService",
    "EmbeddingService",
    "SectionChunker",
    "SessionBuilder",
    "SimilarityIndex",
    "SpacedRepetitionScheduler",
    "StudyContentGenerator",
    "StudySessionService",
    "WebEnrichmentService",
]
