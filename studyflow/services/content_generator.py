"""Study content generation: LLM concept extraction plus templated items.

Concepts are extracted by an LLM provider with a JSON-answer prompt; the
flashcards, multiple-choice and short-answer questions are then derived
from the concept list with fixed templates, so item generation is
deterministic and needs no further model calls.

Concept extraction uses a two-pass strategy:
  - **Pass 1** sends a detailed prompt describing the expected JSON schema.
  - **Pass 2** (only if pass 1 returns unparseable JSON) sends a minimal
    prompt at a lower temperature.  If that also fails,
    :class:`ContentGenerationError` is raised.
"""

from __future__ import annotations

import json
import re
from typing import Any

from studyflow.interfaces.content_generator import IStudyContentGenerator
from studyflow.interfaces.llm_provider import ILLMProvider
from studyflow.models.study import (
    Concept,
    DifficultyLevel,
    Flashcard,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
)
from studyflow.utils.errors import ContentGenerationError
from studyflow.utils.logging import get_logger

# Matches markdown code fences (```json ... ``` or ``` ... ```) that LLMs
# often wrap around JSON output despite being asked not to.
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

_DEFAULT_CATEGORY = "General"
_MISCONCEPTION_TAG = "Misconceptions"
_MAX_MISCONCEPTION_CARDS = 2
_MAX_MCQ_CONCEPTS = 5
_MAX_SHORT_ANSWER_CONCEPTS = 3
_MCQ_OPTION_COUNT = 4
_FALLBACK_DISTRACTORS = (
    "An incorrect but plausible option",
    "Another distractor",
    "Yet another distractor",
)


class StudyContentGenerator(IStudyContentGenerator):
    """Generates concepts and study items for a document.

    Parameters
    ----------
    llm_provider:
        Backend used for concept extraction.
    max_prompt_chars:
        Source text beyond this many characters is truncated before being
        sent to the LLM.
    """

    def __init__(self, llm_provider: ILLMProvider, max_prompt_chars: int = 12000) -> None:
        self._llm = llm_provider
        self._max_prompt_chars = max_prompt_chars
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Concept extraction
    # ------------------------------------------------------------------

    async def extract_concepts(self, text: str) -> list[Concept]:
        """Extract key concepts from *text* via the LLM.

        Returns an empty list for blank text without calling the model.

        Raises
        ------
        ContentGenerationError
            If the LLM returns unparseable JSON on both attempts.
        """
        source = text.strip()
        if not source:
            self._logger.warning("empty_source_text")
            return []

        if len(source) > self._max_prompt_chars:
            source = source[: self._max_prompt_chars]

        provider_name = self._llm.get_provider_name()
        self._logger.info(
            "concept_extraction_start",
            source_chars=len(source),
            llm_provider=provider_name,
        )

        try:
            response = await self._llm.complete(
                system_prompt=self._system_prompt(),
                user_prompt=self._build_extraction_prompt(source),
                temperature=0.2,
                max_tokens=4000,
            )
            parsed = self._parse_llm_response(response)
        except (json.JSONDecodeError, KeyError, ValueError) as exc:
            self._logger.warning(
                "primary_concept_extraction_failed",
                error=str(exc),
                provider=provider_name,
            )
            parsed = None

        if parsed is None:
            self._logger.info("retrying_with_simple_prompt", provider=provider_name)
            try:
                response = await self._llm.complete(
                    system_prompt="You extract study concepts from text and return valid JSON.",
                    user_prompt=self._build_simple_prompt(source),
                    temperature=0.1,
                    max_tokens=2000,
                )
                parsed = self._parse_llm_response(response)
            except (json.JSONDecodeError, KeyError, ValueError) as exc:
                self._logger.error(
                    "retry_concept_extraction_failed",
                    error=str(exc),
                    provider=provider_name,
                )
                raise ContentGenerationError(
                    message=f"LLM returned unparseable JSON after retry: {exc}",
                    provider_name=provider_name,
                ) from exc

        concepts = self._build_concepts(parsed)
        self._logger.info("concept_extraction_complete", concepts=len(concepts))
        return concepts

    # ------------------------------------------------------------------
    # Templated study items
    # ------------------------------------------------------------------

    async def generate_flashcards(
        self, concepts: list[Concept], text: str = ""
    ) -> list[Flashcard]:
        """One definition card per concept plus up to two misconception cards."""
        flashcards: list[Flashcard] = []
        for concept in concepts:
            category = concept.category or _DEFAULT_CATEGORY
            flashcards.append(
                Flashcard(
                    front=f"What is {concept.name}?",
                    back=concept.definition,
                    tags=[category],
                    difficulty=DifficultyLevel.MEDIUM,
                )
            )
            for misconception in concept.common_misconceptions[:_MAX_MISCONCEPTION_CARDS]:
                flashcards.append(
                    Flashcard(
                        front=f"True or False: {misconception}",
                        back=f"False. This is a common misconception about {concept.name}.",
                        tags=[category, _MISCONCEPTION_TAG],
                        difficulty=DifficultyLevel.HARD,
                    )
                )

        self._logger.info(
            "flashcards_generated", concepts=len(concepts), flashcards=len(flashcards)
        )
        return flashcards

    async def generate_multiple_choice(
        self, concepts: list[Concept], text: str = ""
    ) -> list[MultipleChoiceQuestion]:
        """One question for each of the first five concepts.

        Distractors are the definitions of other concepts, padded with
        generic options.  The correct option's position rotates with the
        concept's position so answers are not always first.
        """
        questions: list[MultipleChoiceQuestion] = []
        for position, concept in enumerate(concepts[:_MAX_MCQ_CONCEPTS]):
            distractors = [
                other.definition
                for other in concepts
                if other is not concept
                and other.definition
                and other.definition != concept.definition
            ][: _MCQ_OPTION_COUNT - 1]
            for filler in _FALLBACK_DISTRACTORS:
                if len(distractors) >= _MCQ_OPTION_COUNT - 1:
                    break
                distractors.append(filler)

            correct_index = position % _MCQ_OPTION_COUNT
            options = list(distractors)
            options.insert(correct_index, concept.definition)

            questions.append(
                MultipleChoiceQuestion(
                    question=f"Which of the following best describes {concept.name}?",
                    options=options,
                    correct_option_index=correct_index,
                    explanation=(
                        f"The correct answer is the definition of {concept.name}. "
                        f"{concept.definition}"
                    ),
                    tags=[concept.category or _DEFAULT_CATEGORY],
                    difficulty=DifficultyLevel.MEDIUM,
                )
            )

        self._logger.info("multiple_choice_generated", questions=len(questions))
        return questions

    async def generate_short_answer(
        self, concepts: list[Concept], text: str = ""
    ) -> list[ShortAnswerQuestion]:
        questions = [
            ShortAnswerQuestion(
                question=f"Explain {concept.name} and its significance.",
                model_answer=concept.definition,
                key_points=[
                    f"Definition of {concept.name}",
                    "Key characteristics",
                    "Practical applications",
                ],
                tags=[concept.category or _DEFAULT_CATEGORY],
                difficulty=DifficultyLevel.HARD,
            )
            for concept in concepts[:_MAX_SHORT_ANSWER_CONCEPTS]
        ]
        self._logger.info("short_answer_generated", questions=len(questions))
        return questions

    # ------------------------------------------------------------------
    # Prompt construction
    # ------------------------------------------------------------------

    @staticmethod
    def _system_prompt() -> str:
        return (
            "You are an experienced tutor who turns study material into "
            "well-defined key concepts.  You identify the ideas a student must "
            "understand, define each one precisely, and note the mistakes "
            "learners commonly make about it.  You answer with a JSON object."
        )

    @staticmethod
    def _build_extraction_prompt(text: str) -> str:
        return (
            "Below is text extracted from a study document.  Identify its key "
            "concepts (at most 15) and return them in the JSON format described.\n"
            "\n"
            "## Required JSON Output\n"
            "Return **only** a JSON object (no markdown fences, no commentary):\n"
            "```\n"
            "{\n"
            '  "concepts": [\n'
            "    {\n"
            '      "name": "<concept name>",\n'
            '      "definition": "<one or two sentence definition>",\n'
            '      "related_concepts": ["<name>", ...],\n'
            '      "common_misconceptions": ["<false statement a learner might believe>", ...],\n'
            '      "category": "<topic area>" | null\n'
            "    }\n"
            "  ]\n"
            "}\n"
            "```\n"
            "\n"
            "- Definitions must be self-contained; do not refer to 'the text'.\n"
            "- Misconceptions are phrased as statements that are false.\n"
            "\n"
            "## Document Text\n"
            f"```\n{text}\n```"
        )

    @staticmethod
    def _build_simple_prompt(text: str) -> str:
        return (
            "List the key concepts in this text as valid JSON.\n"
            "\n"
            'Format: {"concepts": [{"name": str, "definition": str, '
            '"related_concepts": [str], "common_misconceptions": [str], '
            '"category": str or null}]}\n'
            "\n"
            f"Text:\n{text}"
        )

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_llm_response(response: str) -> dict[str, Any]:
        """Extract and validate JSON from an LLM response string.

        Raises
        ------
        json.JSONDecodeError
            If no valid JSON can be extracted.
        KeyError
            If the parsed object has no ``concepts`` key.
        ValueError
            If the JSON is not an object or ``concepts`` is not a list.
        """
        text = response.strip()

        fence_match = _JSON_FENCE_RE.search(text)
        if fence_match:
            text = fence_match.group(1).strip()

        # Preamble before the object: keep the outermost brace pair.
        if not text.startswith("{"):
            brace_start = text.find("{")
            brace_end = text.rfind("}")
            if brace_start != -1 and brace_end > brace_start:
                text = text[brace_start : brace_end + 1]

        parsed = json.loads(text)

        if not isinstance(parsed, dict):
            raise ValueError("LLM response is not a JSON object")
        if "concepts" not in parsed:
            raise KeyError("LLM response missing required 'concepts' key")
        if not isinstance(parsed["concepts"], list):
            raise ValueError("'concepts' must be a list")

        return parsed

    def _build_concepts(self, parsed: dict[str, Any]) -> list[Concept]:
        """Map parsed JSON entries to :class:`Concept` models.

        Entries without a name are skipped; duplicate names (case-insensitive)
        keep the first occurrence.
        """
        concepts: list[Concept] = []
        seen: set[str] = set()
        for raw in parsed["concepts"]:
            if not isinstance(raw, dict):
                continue
            name = str(raw.get("name") or "").strip()
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())

            category = str(raw.get("category") or "").strip()
            concepts.append(
                Concept(
                    name=name,
                    definition=str(raw.get("definition") or "").strip(),
                    related_concepts=_string_list(raw.get("related_concepts")),
                    common_misconceptions=_string_list(raw.get("common_misconceptions")),
                    category=category or None,
                )
            )
        return concepts


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]
