"""Shared pytest fixtures for the StudyFlow test suite."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from studyflow.interfaces.llm_provider import ILLMProvider
from studyflow.interfaces.web_search_provider import IWebSearchProvider, SearchResult
from studyflow.models.study import (
    Concept,
    DifficultyLevel,
    Flashcard,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    StudyContent,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)  # noqa: UP017


@pytest.fixture(autouse=True, scope="session")
def _test_logging() -> None:
    """Log warnings and errors only, and never cache bound loggers.

    Uncached loggers resolve ``sys.stdout`` on every call, so output always
    goes to the capture stream of the currently running test.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


# ---------------------------------------------------------------------------
# Text fixtures
# ---------------------------------------------------------------------------


def make_sentence(length: int, letter: str = "b") -> str:
    """Return a sentence of exactly *length* characters ending with a period."""
    return "A" + letter * (length - 2) + "."


def make_body(sentences: int, length: int, letter: str = "b") -> str:
    """Join *sentences* sentences of *length* characters with single spaces."""
    return " ".join(make_sentence(length, letter) for _ in range(sentences))


@pytest.fixture
def sample_study_text() -> str:
    """A short study document with markdown, colon and numbered headings."""
    return (
        "# Cell Biology\n"
        "\n"
        "Cells are the basic structural and functional units of every living organism. "
        "Each cell is enclosed by a membrane that controls what enters and leaves. "
        "Inside, organelles divide the work of keeping the cell alive and growing.\n"
        "\n"
        "Key Processes:\n"
        "Cellular respiration converts glucose and oxygen into usable chemical energy. "
        "It takes place mostly in the mitochondria and releases carbon dioxide. "
        "Photosynthesis runs the reverse reaction in plant cells using light energy.\n"
        "\n"
        "2. Genetics\n"
        "DNA stores the instructions a cell needs to build proteins and to divide. "
        "Genes are transcribed into messenger RNA, which ribosomes then translate. "
        "Mutations change these instructions and can alter the resulting proteins.\n"
    )


# ---------------------------------------------------------------------------
# Study content fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixed_clock():
    """Zero-argument clock returning :data:`FIXED_NOW`."""
    return lambda: FIXED_NOW


@pytest.fixture
def sample_concepts() -> list[Concept]:
    return [
        Concept(
            name="Cellular respiration",
            definition="The process that converts glucose into ATP.",
            related_concepts=["Mitochondria"],
            common_misconceptions=[
                "Only animals perform cellular respiration.",
                "Respiration is the same as breathing.",
                "Respiration happens only during the day.",
            ],
            category="Biology",
        ),
        Concept(
            name="Photosynthesis",
            definition="The process plants use to turn light into chemical energy.",
            common_misconceptions=["Plants get their mass from the soil."],
            category="Biology",
        ),
        Concept(
            name="DNA",
            definition="The molecule that stores genetic instructions.",
        ),
    ]


@pytest.fixture
def concepts_json() -> str:
    """An LLM-style JSON answer describing three concepts."""
    return json.dumps(
        {
            "concepts": [
                {
                    "name": "Cellular respiration",
                    "definition": "The process that converts glucose into ATP.",
                    "related_concepts": ["Mitochondria"],
                    "common_misconceptions": [
                        "Only animals perform cellular respiration.",
                        "Respiration is the same as breathing.",
                    ],
                    "category": "Biology",
                },
                {
                    "name": "Photosynthesis",
                    "definition": "The process plants use to turn light into chemical energy.",
                    "related_concepts": [],
                    "common_misconceptions": ["Plants get their mass from the soil."],
                    "category": "Biology",
                },
                {
                    "name": "DNA",
                    "definition": "The molecule that stores genetic instructions.",
                    "related_concepts": ["Genes"],
                    "common_misconceptions": [],
                    "category": None,
                },
            ]
        }
    )


def make_study_content(
    flashcards: int = 0,
    mcqs: int = 0,
    short_answers: int = 0,
    now: datetime = FIXED_NOW,
) -> StudyContent:
    """Build study content whose flashcards are all due, most overdue first."""
    return StudyContent(
        document_id="doc-1",
        flashcards=[
            Flashcard(
                id=f"fc-{i}",
                front=f"Front {i}",
                back=f"Back {i}",
                tags=["Biology"],
                next_review_at=now - timedelta(days=flashcards - i),
            )
            for i in range(flashcards)
        ],
        multiple_choice_questions=[
            MultipleChoiceQuestion(
                id=f"mcq-{i}",
                question=f"Question {i}?",
                options=["a", "b", "c", "d"],
                correct_option_index=0,
                tags=["Biology"],
            )
            for i in range(mcqs)
        ],
        short_answer_questions=[
            ShortAnswerQuestion(
                id=f"sa-{i}",
                question=f"Explain {i}.",
                model_answer="Because.",
                tags=["Genetics"],
                difficulty=DifficultyLevel.HARD,
            )
            for i in range(short_answers)
        ],
    )


# ---------------------------------------------------------------------------
# Mock provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm_provider(concepts_json: str) -> ILLMProvider:
    """Return a mock ILLMProvider that answers with :func:`concepts_json`."""
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "mock-llm"
    mock.is_available.return_value = True
    mock.complete = AsyncMock(return_value=concepts_json)
    return mock


@pytest.fixture
def mock_search_provider() -> IWebSearchProvider:
    """Return a mock IWebSearchProvider with two results per query."""
    mock = MagicMock(spec=IWebSearchProvider)
    mock.get_provider_name.return_value = "mock-search"
    mock.is_available.return_value = True

    async def _search(query: str, num_results: int = 10) -> list[SearchResult]:
        return [
            SearchResult(
                title=f"{query} - Encyclopedia",
                url="https://encyclopedia.example/entry",
                snippet=f"An overview of {query}.",
            ),
            SearchResult(
                title=f"{query} - Journal",
                url="https://journal.example/article",
                snippet="Recent findings and applications.",
            ),
        ][:num_results]

    mock.search = AsyncMock(side_effect=_search)
    return mock
