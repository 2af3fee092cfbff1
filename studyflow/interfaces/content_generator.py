"""Abstract base class for study content generation.

The pipeline orchestrator drives generation one artefact type at a time so
that it can report a progress checkpoint between each step.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from studyflow.models.study import (
    Concept,
    Flashcard,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
)


# Concrete implementation: StudyContentGenerator (studyflow/services/)
class IStudyContentGenerator(ABC):
    """Contract for turning document text into study material."""

    @abstractmethod
    async def extract_concepts(self, text: str) -> list[Concept]:
        """Extract the key concepts from *text*.

        Raises
        ------
        studyflow.utils.errors.ContentGenerationError
            If concepts cannot be extracted.
        """

    @abstractmethod
    async def generate_flashcards(
        self, concepts: list[Concept], text: str = ""
    ) -> list[Flashcard]:
        """Derive flashcards from *concepts*.

        *text* is the document text the concepts were extracted from.
        Implementations may use it to ground items in the source; the
        templated generator does not read it.
        """

    @abstractmethod
    async def generate_multiple_choice(
        self, concepts: list[Concept], text: str = ""
    ) -> list[MultipleChoiceQuestion]:
        """Derive multiple-choice questions from *concepts*."""

    @abstractmethod
    async def generate_short_answer(
        self, concepts: list[Concept], text: str = ""
    ) -> list[ShortAnswerQuestion]:
        """Derive short-answer questions from *concepts*."""
