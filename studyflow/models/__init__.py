"""Pydantic v2 data models for StudyFlow.

- **document** -- Document, DocumentChunk, ScoredChunk, DocumentStatus.
- **study** -- Concept, Flashcard, quiz questions, enrichment and the
  StudyContent aggregate.
- **session** -- study sessions, the tagged session-item variant, review
  records and statistics.
- **pipeline** -- ProcessingProgress checkpoints.
"""

from studyflow.models.document import Document, DocumentChunk, DocumentStatus, ScoredChunk
from studyflow.models.pipeline import ProcessingProgress
from studyflow.models.session import (
    FlashcardItem,
    MultipleChoiceItem,
    ReviewItemType,
    ReviewOutcome,
    ReviewRecord,
    SessionItem,
    SessionStatistics,
    ShortAnswerItem,
    StudySession,
)
from studyflow.models.study import (
    Citation,
    Concept,
    DifficultyLevel,
    EnrichedKnowledge,
    Flashcard,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    StudyContent,
)

__all__ = [
    "Citation",
    "Concept",
    "DifficultyLevel",
    "Document",
    "DocumentChunk",
    "DocumentStatus",
    "EnrichedKnowledge",
    "Flashcard",
    "FlashcardItem",
    "MultipleChoiceItem",
    "MultipleChoiceQuestion",
    "ProcessingProgress",
    "ReviewItemType",
    "ReviewOutcome",
    "ReviewRecord",
    "ScoredChunk",
    "SessionItem",
    "SessionStatistics",
    "ShortAnswerItem",
    "ShortAnswerQuestion",
    "StudyContent",
    "StudySession",
]
