"""Unit tests for StudyContentGenerator."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from studyflow.interfaces.llm_provider import ILLMProvider
from studyflow.models.study import Concept, DifficultyLevel
from studyflow.services.content_generator import StudyContentGenerator
from studyflow.utils.errors import ContentGenerationError, LLMError


def _llm(*responses: str) -> MagicMock:
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "mock-llm"
    mock.complete = AsyncMock(side_effect=list(responses))
    return mock


class TestExtractConcepts:
    @pytest.mark.asyncio
    async def test_parses_plain_json(self, mock_llm_provider) -> None:
        generator = StudyContentGenerator(mock_llm_provider)

        concepts = await generator.extract_concepts("Some study text about cells.")

        assert [c.name for c in concepts] == ["Cellular respiration", "Photosynthesis", "DNA"]
        assert concepts[0].category == "Biology"
        assert concepts[0].related_concepts == ["Mitochondria"]
        assert len(concepts[0].common_misconceptions) == 2
        assert concepts[2].category is None
        mock_llm_provider.complete.assert_awaited_once()
        kwargs = mock_llm_provider.complete.call_args.kwargs
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 4000

    @pytest.mark.asyncio
    async def test_parses_fenced_json(self, concepts_json: str) -> None:
        llm = _llm(f"Here you go:\n```json\n{concepts_json}\n```\nEnjoy!")
        generator = StudyContentGenerator(llm)

        concepts = await generator.extract_concepts("text")

        assert len(concepts) == 3

    @pytest.mark.asyncio
    async def test_parses_json_after_preamble(self, concepts_json: str) -> None:
        llm = _llm(f"Sure! {concepts_json} Hope this helps.")
        generator = StudyContentGenerator(llm)

        concepts = await generator.extract_concepts("text")

        assert len(concepts) == 3

    @pytest.mark.asyncio
    async def test_retries_with_simple_prompt(self, concepts_json: str) -> None:
        llm = _llm("not json at all", concepts_json)
        generator = StudyContentGenerator(llm)

        concepts = await generator.extract_concepts("text")

        assert len(concepts) == 3
        assert llm.complete.await_count == 2
        retry_kwargs = llm.complete.call_args_list[1].kwargs
        assert retry_kwargs["temperature"] == 0.1
        assert retry_kwargs["max_tokens"] == 2000

    @pytest.mark.asyncio
    async def test_missing_concepts_key_triggers_retry(self, concepts_json: str) -> None:
        llm = _llm(json.dumps({"ideas": []}), concepts_json)
        generator = StudyContentGenerator(llm)

        concepts = await generator.extract_concepts("text")

        assert len(concepts) == 3

    @pytest.mark.asyncio
    async def test_two_bad_responses_raise(self) -> None:
        llm = _llm("garbage", json.dumps({"concepts": "not a list"}))
        generator = StudyContentGenerator(llm)

        with pytest.raises(ContentGenerationError) as exc_info:
            await generator.extract_concepts("text")
        assert exc_info.value.provider_name == "mock-llm"

    @pytest.mark.asyncio
    async def test_blank_text_skips_llm(self) -> None:
        llm = _llm()
        generator = StudyContentGenerator(llm)

        assert await generator.extract_concepts("   \n ") == []
        llm.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_long_text_is_truncated(self, concepts_json: str) -> None:
        llm = _llm(concepts_json)
        generator = StudyContentGenerator(llm, max_prompt_chars=100)
        text = "a" * 100 + "ZZZZ"

        await generator.extract_concepts(text)

        prompt = llm.complete.call_args.kwargs["user_prompt"]
        assert "a" * 100 in prompt
        assert "ZZZZ" not in prompt

    @pytest.mark.asyncio
    async def test_skips_nameless_and_duplicate_concepts(self) -> None:
        payload = json.dumps(
            {
                "concepts": [
                    {"name": "Osmosis", "definition": "Water diffusion."},
                    {"name": "", "definition": "Nameless."},
                    {"definition": "No name key."},
                    {"name": "osmosis", "definition": "Duplicate."},
                    "not an object",
                    {"name": "Diffusion", "common_misconceptions": "not a list"},
                ]
            }
        )
        generator = StudyContentGenerator(_llm(payload))

        concepts = await generator.extract_concepts("text")

        assert [c.name for c in concepts] == ["Osmosis", "Diffusion"]
        assert concepts[0].definition == "Water diffusion."
        assert concepts[1].common_misconceptions == []

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self) -> None:
        llm = MagicMock(spec=ILLMProvider)
        llm.get_provider_name.return_value = "mock-llm"
        llm.complete = AsyncMock(side_effect=LLMError(message="quota", provider_name="mock-llm"))
        generator = StudyContentGenerator(llm)

        with pytest.raises(LLMError):
            await generator.extract_concepts("text")


class TestFlashcards:
    @pytest.mark.asyncio
    async def test_definition_and_misconception_cards(self, sample_concepts) -> None:
        generator = StudyContentGenerator(_llm())

        cards = await generator.generate_flashcards(sample_concepts)

        # 3 definition cards, 2 + 1 misconception cards
        assert len(cards) == 6
        first = cards[0]
        assert first.front == "What is Cellular respiration?"
        assert first.back == "The process that converts glucose into ATP."
        assert first.tags == ["Biology"]
        assert first.difficulty is DifficultyLevel.MEDIUM
        assert first.repetition_count == 0
        assert first.ease_factor == 2.5
        assert first.interval_days == 1

        misconception = cards[1]
        assert misconception.front == "True or False: Only animals perform cellular respiration."
        assert misconception.back == (
            "False. This is a common misconception about Cellular respiration."
        )
        assert misconception.tags == ["Biology", "Misconceptions"]
        assert misconception.difficulty is DifficultyLevel.HARD

    @pytest.mark.asyncio
    async def test_misconceptions_capped_at_two(self, sample_concepts) -> None:
        generator = StudyContentGenerator(_llm())

        cards = await generator.generate_flashcards(sample_concepts[:1])

        assert len(cards) == 3

    @pytest.mark.asyncio
    async def test_uncategorised_concept_tagged_general(self, sample_concepts) -> None:
        generator = StudyContentGenerator(_llm())

        cards = await generator.generate_flashcards([sample_concepts[2]])

        assert cards[0].tags == ["General"]

    @pytest.mark.asyncio
    async def test_no_concepts(self) -> None:
        assert await StudyContentGenerator(_llm()).generate_flashcards([]) == []


class TestMultipleChoice:
    @pytest.mark.asyncio
    async def test_correct_option_is_the_definition(self, sample_concepts) -> None:
        generator = StudyContentGenerator(_llm())

        questions = await generator.generate_multiple_choice(sample_concepts)

        assert len(questions) == 3
        for concept, question in zip(sample_concepts, questions):
            assert question.question == (
                f"Which of the following best describes {concept.name}?"
            )
            assert len(question.options) == 4
            assert question.options[question.correct_option_index] == concept.definition
            assert question.explanation.startswith(
                f"The correct answer is the definition of {concept.name}."
            )

    @pytest.mark.asyncio
    async def test_correct_position_rotates(self, sample_concepts) -> None:
        generator = StudyContentGenerator(_llm())

        questions = await generator.generate_multiple_choice(sample_concepts)

        assert [q.correct_option_index for q in questions] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_distractors_are_other_definitions(self, sample_concepts) -> None:
        generator = StudyContentGenerator(_llm())

        question = (await generator.generate_multiple_choice(sample_concepts))[0]

        assert sample_concepts[1].definition in question.options
        assert sample_concepts[2].definition in question.options
        assert "An incorrect but plausible option" in question.options

    @pytest.mark.asyncio
    async def test_single_concept_padded_with_fillers(self) -> None:
        generator = StudyContentGenerator(_llm())
        concept = Concept(name="Entropy", definition="A measure of disorder.")

        question = (await generator.generate_multiple_choice([concept]))[0]

        assert question.options == [
            "A measure of disorder.",
            "An incorrect but plausible option",
            "Another distractor",
            "Yet another distractor",
        ]
        assert question.correct_option_index == 0
        assert question.tags == ["General"]

    @pytest.mark.asyncio
    async def test_at_most_five_questions(self) -> None:
        generator = StudyContentGenerator(_llm())
        concepts = [Concept(name=f"C{i}", definition=f"Definition {i}.") for i in range(8)]

        questions = await generator.generate_multiple_choice(concepts)

        assert len(questions) == 5


class TestShortAnswer:
    @pytest.mark.asyncio
    async def test_first_three_concepts(self) -> None:
        generator = StudyContentGenerator(_llm())
        concepts = [
            Concept(name=f"C{i}", definition=f"Definition {i}.", category="Physics")
            for i in range(5)
        ]

        questions = await generator.generate_short_answer(concepts)

        assert len(questions) == 3
        first = questions[0]
        assert first.question == "Explain C0 and its significance."
        assert first.model_answer == "Definition 0."
        assert first.key_points == [
            "Definition of C0",
            "Key characteristics",
            "Practical applications",
        ]
        assert first.tags == ["Physics"]
        assert first.difficulty is DifficultyLevel.HARD
