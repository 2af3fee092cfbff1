"""Study session lifecycle: start, record reviews, complete.

Sessions are held in memory until removed or purged once completed.
Recording a flashcard review runs the spaced-repetition scheduler on the
card, which updates the card held by the document's study content.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from studyflow.models.session import (
    FlashcardItem,
    ReviewOutcome,
    ReviewRecord,
    SessionStatistics,
    StudySession,
)
from studyflow.models.study import StudyContent
from studyflow.services.scheduler import SpacedRepetitionScheduler
from studyflow.services.session_builder import SessionBuilder
from studyflow.utils.errors import InvalidInputError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_SESSION_SIZE = 20


class StudySessionService:
    """Runs study sessions over a document's generated content.

    Parameters
    ----------
    builder:
        Produces the ordered session items.
    scheduler:
        Applied to flashcards when a review is recorded.
    default_session_size:
        Item count used when :meth:`start_session` is not given one.
    clock:
        Zero-argument callable returning the current UTC time.
    """

    def __init__(
        self,
        builder: SessionBuilder,
        scheduler: SpacedRepetitionScheduler,
        default_session_size: int = _DEFAULT_SESSION_SIZE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._builder = builder
        self._scheduler = scheduler
        self._default_session_size = default_session_size
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))  # noqa: UP017
        self._sessions: dict[str, StudySession] = {}

    def start_session(
        self,
        content: StudyContent,
        item_count: int | None = None,
        user_id: str | None = None,
    ) -> StudySession:
        """Build and register a new session for *content*."""
        count = item_count if item_count is not None else self._default_session_size
        items = self._builder.build_session(content, count)

        session = StudySession(
            document_id=content.document_id,
            user_id=user_id,
            started_at=self._clock(),
            items=items,
            statistics=SessionStatistics(total_items=len(items)),
        )
        self._sessions[session.id] = session
        logger.info(
            "study_session_started",
            session_id=session.id,
            document_id=content.document_id,
            items=len(items),
        )
        return session

    def get_session(self, session_id: str) -> StudySession | None:
        return self._sessions.get(session_id)

    def record_review(
        self,
        session_id: str,
        item_id: str,
        outcome: ReviewOutcome,
        time_spent_seconds: float = 0.0,
    ) -> ReviewRecord:
        """Record the learner's *outcome* for one session item.

        Flashcards are rescheduled; questions only contribute statistics.

        Raises
        ------
        InvalidInputError
            If the session is unknown or completed, the item is not part of
            the session, the item was already reviewed, or the time spent
            is negative.
        """
        session = self._require_open_session(session_id)
        if time_spent_seconds < 0:
            raise InvalidInputError(
                message=f"time_spent_seconds must not be negative, got {time_spent_seconds}"
            )

        item = next((i for i in session.items if i.item_id == item_id), None)
        if item is None:
            raise InvalidInputError(
                message=f"Item {item_id} is not part of session {session_id}"
            )
        if any(r.item_id == item_id for r in session.reviews):
            raise InvalidInputError(
                message=f"Item {item_id} was already reviewed in session {session_id}"
            )

        if isinstance(item, FlashcardItem):
            self._scheduler.schedule(item.flashcard, outcome)

        record = ReviewRecord(
            item_id=item_id,
            item_type=item.kind,
            outcome=outcome,
            reviewed_at=self._clock(),
            time_spent_seconds=time_spent_seconds,
        )
        session.reviews.append(record)
        self._update_statistics(session.statistics, outcome, time_spent_seconds, item.tags)

        logger.debug(
            "review_recorded",
            session_id=session_id,
            item_id=item_id,
            item_type=item.kind.value,
            outcome=outcome.value,
        )
        return record

    def complete_session(self, session_id: str) -> StudySession:
        """Mark the session completed.  Completing twice is a no-op."""
        session = self._sessions.get(session_id)
        if session is None:
            raise InvalidInputError(message=f"Unknown study session {session_id}")
        if session.completed_at is None:
            session.completed_at = self._clock()
            logger.info(
                "study_session_completed",
                session_id=session_id,
                reviewed=len(session.reviews),
                accuracy=round(session.statistics.accuracy, 3),
            )
        return session

    def remove_session(self, session_id: str) -> bool:
        """Forget a session.  Returns False if it was not held."""
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.debug("study_session_removed", session_id=session_id)
        return removed

    def purge_completed(self) -> int:
        """Drop every completed session and return how many were dropped."""
        completed = [sid for sid, s in self._sessions.items() if s.is_complete]
        for session_id in completed:
            del self._sessions[session_id]
        if completed:
            logger.info("study_sessions_purged", sessions=len(completed))
        return len(completed)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require_open_session(self, session_id: str) -> StudySession:
        session = self._sessions.get(session_id)
        if session is None:
            raise InvalidInputError(message=f"Unknown study session {session_id}")
        if session.is_complete:
            raise InvalidInputError(message=f"Study session {session_id} is already completed")
        return session

    @staticmethod
    def _update_statistics(
        stats: SessionStatistics,
        outcome: ReviewOutcome,
        time_spent_seconds: float,
        tags: list[str],
    ) -> None:
        if outcome is ReviewOutcome.CORRECT:
            stats.correct_answers += 1
        elif outcome is ReviewOutcome.INCORRECT:
            stats.incorrect_answers += 1
        elif outcome is ReviewOutcome.PARTIAL:
            stats.partial_answers += 1
        else:
            stats.skipped += 1
        stats.total_time_spent_seconds += time_spent_seconds
        for tag in tags:
            stats.topic_breakdown[tag] = stats.topic_breakdown.get(tag, 0) + 1
