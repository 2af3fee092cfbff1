"""Study session models.

Session items are a tagged variant (:class:`FlashcardItem`,
:class:`MultipleChoiceItem` or :class:`ShortAnswerItem`) discriminated by
``kind``.  Items are transient: the session builder
constructs them fresh for every session request and they reference (never
copy) the entities held by :class:`~studyflow.models.study.StudyContent`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from studyflow.models.study import Flashcard, MultipleChoiceQuestion, ShortAnswerQuestion


class ReviewOutcome(str, Enum):  # noqa: UP042
    """How the learner did on one review; the only input to scheduling."""

    CORRECT = "CORRECT"
    PARTIAL = "PARTIAL"
    INCORRECT = "INCORRECT"
    SKIPPED = "SKIPPED"


class ReviewItemType(str, Enum):  # noqa: UP042
    FLASHCARD = "FLASHCARD"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    SHORT_ANSWER = "SHORT_ANSWER"


# ---------------------------------------------------------------------------
# Session items: the tagged variant.
# ---------------------------------------------------------------------------
class FlashcardItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ReviewItemType.FLASHCARD] = ReviewItemType.FLASHCARD
    flashcard: Flashcard

    @property
    def item_id(self) -> str:
        return self.flashcard.id

    @property
    def tags(self) -> list[str]:
        return self.flashcard.tags


class MultipleChoiceItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ReviewItemType.MULTIPLE_CHOICE] = ReviewItemType.MULTIPLE_CHOICE
    question: MultipleChoiceQuestion

    @property
    def item_id(self) -> str:
        return self.question.id

    @property
    def tags(self) -> list[str]:
        return self.question.tags


class ShortAnswerItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ReviewItemType.SHORT_ANSWER] = ReviewItemType.SHORT_ANSWER
    question: ShortAnswerQuestion

    @property
    def item_id(self) -> str:
        return self.question.id

    @property
    def tags(self) -> list[str]:
        return self.question.tags


SessionItem = Annotated[
    Union[FlashcardItem, MultipleChoiceItem, ShortAnswerItem],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Review records and statistics.
# ---------------------------------------------------------------------------
class ReviewRecord(BaseModel):
    """One answered (or skipped) session item."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    item_type: ReviewItemType
    outcome: ReviewOutcome
    reviewed_at: datetime
    time_spent_seconds: float = Field(default=0.0, ge=0.0)


class SessionStatistics(BaseModel):
    """Running totals for a study session.

    ``topic_breakdown`` counts reviewed items per tag.
    """

    total_items: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    incorrect_answers: int = Field(default=0, ge=0)
    partial_answers: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    total_time_spent_seconds: float = Field(default=0.0, ge=0.0)
    topic_breakdown: dict[str, int] = Field(default_factory=dict)

    @property
    def accuracy(self) -> float:
        """Fraction of answered (non-skipped) items that were correct."""
        answered = self.correct_answers + self.incorrect_answers + self.partial_answers
        if answered == 0:
            return 0.0
        return self.correct_answers / answered


class StudySession(BaseModel):
    """A bounded, ordered set of review items presented in one sitting."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    document_id: str
    user_id: str | None = None
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
    completed_at: datetime | None = None
    items: list[SessionItem] = Field(default_factory=list)
    reviews: list[ReviewRecord] = Field(default_factory=list)
    statistics: SessionStatistics = Field(default_factory=SessionStatistics)

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None
