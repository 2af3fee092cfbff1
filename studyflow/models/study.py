"""Study content models produced by the document-to-study pipeline.

Defines Pydantic v2 models for concepts, flashcards, quiz questions and
web-enriched knowledge, plus the :class:`StudyContent` aggregate that a
successful pipeline run attaches to its document.

Concepts, questions and enrichment entries are frozen.  :class:`Flashcard`
is the one mutable model: its scheduling fields (``next_review_at``,
``repetition_count``, ``ease_factor``, ``interval_days``) are updated in
place by :class:`~studyflow.services.scheduler.SpacedRepetitionScheduler`
and nowhere else.  ``validate_assignment`` keeps the scheduling invariants
enforced on every update.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class DifficultyLevel(str, Enum):  # noqa: UP042
    """Coarse difficulty label attached to every study item."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


# ---------------------------------------------------------------------------
# Concept: the unit the content generator extracts from source text.
# ---------------------------------------------------------------------------
class Concept(BaseModel):
    """A key idea extracted from a document.

    Flashcards, multiple-choice and short-answer questions are all derived
    from the concept list, and enrichment search queries are built from the
    concept names.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str
    definition: str = ""
    related_concepts: list[str] = Field(default_factory=list)
    common_misconceptions: list[str] = Field(default_factory=list)
    category: str | None = None


# ---------------------------------------------------------------------------
# Flashcard: the schedulable review item.
# ---------------------------------------------------------------------------
class Flashcard(BaseModel):
    """A front/back review card with SM-2 scheduling state.

    A fresh card is due immediately, has never been repeated, starts with
    the standard 2.5 ease factor and a one-day interval.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    front: str
    back: str
    tags: list[str] = Field(default_factory=list)
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM

    # Spaced repetition state
    next_review_at: datetime = Field(default_factory=_utcnow)
    repetition_count: int = Field(default=0, ge=0)
    ease_factor: float = Field(default=2.5, ge=1.3)
    interval_days: int = Field(default=1, ge=1)


class MultipleChoiceQuestion(BaseModel):
    """A question with several options, exactly one of them correct."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    question: str
    options: list[str] = Field(default_factory=list)
    correct_option_index: int = Field(default=0, ge=0)
    explanation: str = ""
    tags: list[str] = Field(default_factory=list)
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM


class ShortAnswerQuestion(BaseModel):
    """An open question graded against a model answer and key points."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    question: str
    model_answer: str = ""
    key_points: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM


# ---------------------------------------------------------------------------
# Enrichment: knowledge gathered from web search about the concepts.
# ---------------------------------------------------------------------------
class Citation(BaseModel):
    """Provenance for one enrichment summary."""

    model_config = ConfigDict(frozen=True)

    source: str
    url: str = ""
    excerpt: str = ""


class EnrichedKnowledge(BaseModel):
    """A summary of external material for one search topic, with citations."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    topic: str
    summary: str = ""
    citations: list[Citation] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# StudyContent: everything one pipeline run produced for a document.
# ---------------------------------------------------------------------------
class StudyContent(BaseModel):
    """Aggregate study material for one document.

    Created once per successfully completed pipeline run and replaced only by
    re-running the pipeline.  Apart from flashcard scheduling fields it is
    never modified after creation.
    """

    id: str = Field(default_factory=_new_id)
    document_id: str
    created_at: datetime = Field(default_factory=_utcnow)

    concepts: list[Concept] = Field(default_factory=list)
    flashcards: list[Flashcard] = Field(default_factory=list)
    multiple_choice_questions: list[MultipleChoiceQuestion] = Field(default_factory=list)
    short_answer_questions: list[ShortAnswerQuestion] = Field(default_factory=list)
    enriched_knowledge: list[EnrichedKnowledge] = Field(default_factory=list)
