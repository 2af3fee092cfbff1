"""Adaptive study-session assembly.

Interleaves due flashcards, multiple-choice questions and short-answer
questions so a session never runs long stretches of one item type.  Pool
sizes are fixed fractions of the requested item count: half flashcards, a
third multiple choice, a sixth short answer.
"""

from __future__ import annotations

import random
from collections import deque

import structlog

from studyflow.models.session import (
    FlashcardItem,
    MultipleChoiceItem,
    SessionItem,
    ShortAnswerItem,
)
from studyflow.models.study import StudyContent
from studyflow.services.scheduler import SpacedRepetitionScheduler
from studyflow.utils.errors import InvalidInputError

logger = structlog.get_logger(logger_name=__name__)

# A short-answer item is interleaved whenever the session length is a
# multiple of this.
_SHORT_ANSWER_STRIDE = 5


class SessionBuilder:
    """Builds an ordered list of session items from a document's content.

    Parameters
    ----------
    scheduler:
        Supplies the due-flashcard ordering.
    rng:
        Random source used to shuffle question pools.  Defaults to a fresh
        unseeded :class:`random.Random`.
    """

    def __init__(
        self,
        scheduler: SpacedRepetitionScheduler,
        rng: random.Random | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._rng = rng or random.Random()

    def build_session(self, content: StudyContent, item_count: int) -> list[SessionItem]:
        """Return up to *item_count* interleaved session items.

        Raises
        ------
        InvalidInputError
            If ``item_count < 1``.
        """
        if item_count < 1:
            raise InvalidInputError(message=f"item_count must be at least 1, got {item_count}")

        due = self._scheduler.due_flashcards(content)
        flashcards = deque(
            FlashcardItem(flashcard=card) for card in due[: item_count // 2]
        )
        mcqs = deque(
            MultipleChoiceItem(question=q)
            for q in self._sample(content.multiple_choice_questions, item_count // 3)
        )
        short_answers = deque(
            ShortAnswerItem(question=q)
            for q in self._sample(content.short_answer_questions, item_count // 6)
        )

        items: list[SessionItem] = []
        while len(items) < item_count and (flashcards or mcqs or short_answers):
            if flashcards:
                items.append(flashcards.popleft())
            if mcqs:
                items.append(mcqs.popleft())
            if short_answers and (
                len(items) % _SHORT_ANSWER_STRIDE == 0 or not (flashcards or mcqs)
            ):
                items.append(short_answers.popleft())

        logger.info(
            "session_built",
            document_id=content.document_id,
            requested=item_count,
            items=len(items),
            due_flashcards=len(due),
        )
        return items

    def _sample(self, pool: list, count: int) -> list:
        """Uniformly shuffle a copy of *pool* and take the first *count*."""
        if count <= 0 or not pool:
            return []
        shuffled = list(pool)
        self._rng.shuffle(shuffled)
        return shuffled[:count]
