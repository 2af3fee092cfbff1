"""SM-2 spaced-repetition scheduling for flashcards.

The scheduler is the only component that mutates a flashcard's scheduling
fields.  One call updates one card in place; callers serialise concurrent
reviews of the same card.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import structlog

from studyflow.models.session import ReviewOutcome
from studyflow.models.study import Flashcard, StudyContent

logger = structlog.get_logger(logger_name=__name__)

_QUALITY: dict[ReviewOutcome, float] = {
    ReviewOutcome.CORRECT: 5.0,
    ReviewOutcome.PARTIAL: 3.0,
    ReviewOutcome.SKIPPED: 2.0,
    ReviewOutcome.INCORRECT: 0.0,
}

_MIN_EASE_FACTOR = 1.3
_PASSING_QUALITY = 3.0


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class SpacedRepetitionScheduler:
    """Schedules flashcard reviews with the SM-2 algorithm.

    Parameters
    ----------
    clock:
        Zero-argument callable returning the current UTC time.  Tests pass
        a fixed clock to make ``next_review_at`` deterministic.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utcnow

    def now(self) -> datetime:
        return self._clock()

    def schedule(self, card: Flashcard, outcome: ReviewOutcome) -> Flashcard:
        """Apply one review *outcome* to *card* and return the same card.

        A failing review (quality below 3) resets the repetition count and
        the interval to one day.  The ease factor never drops below 1.3.
        """
        quality = _QUALITY[outcome]
        repetitions = card.repetition_count + 1

        penalty = 5.0 - quality
        ease = max(
            _MIN_EASE_FACTOR,
            card.ease_factor + (0.1 - penalty * (0.08 + penalty * 0.02)),
        )

        if quality < _PASSING_QUALITY:
            repetitions = 0
            interval = 1
        elif repetitions == 1:
            interval = 1
        elif repetitions == 2:
            interval = 6
        else:
            interval = round(card.interval_days * ease)

        card.repetition_count = repetitions
        card.ease_factor = ease
        card.interval_days = interval
        card.next_review_at = self._clock() + timedelta(days=interval)

        logger.debug(
            "flashcard_scheduled",
            flashcard_id=card.id,
            outcome=outcome.value,
            interval_days=interval,
            ease_factor=round(ease, 3),
        )
        return card

    def due_flashcards(self, content: StudyContent) -> list[Flashcard]:
        """Return flashcards due now, most overdue first."""
        now = self._clock()
        due = [card for card in content.flashcards if card.next_review_at <= now]
        due.sort(key=lambda card: card.next_review_at)
        return due
