"""Tests for the question generation pipeline."""

import asyncio
import json

import pytest
from unittest.mock import AsyncMock

from config import ProviderConfig
from models.interview import DifficultyLevel, QuestionType
from models.job import GenerationConfig, Job, QuestionSpec
from services.question_generator import (
    GenerationMode,
    QuestionGenerationService,
    build_prompt,
    fallback_questions,
    normalize_questions,
)
from utils.errors import ConfigurationError, GenerationError

LAYOUT = [
    QuestionType.BEHAVIORAL,
    QuestionType.TECHNICAL,
    QuestionType.TECHNICAL,
    QuestionType.CODING,
    QuestionType.CODING,
]
IDS = ["q1", "q2", "q3", "q4", "q5"]
WEIGHTS = [1, 2, 2, 3, 3]


def _provider(response=None, side_effect=None):
    provider = AsyncMock()
    provider.generate_text = AsyncMock(return_value=response, side_effect=side_effect)
    return provider


def _assert_layout(questions):
    assert len(questions) == 5
    assert [q.type for q in questions] == LAYOUT
    assert [q.id for q in questions] == IDS
    assert [q.weight for q in questions] == WEIGHTS


class TestModeResolution:
    """Mode is chosen once, at construction."""

    def test_mock_flag_selects_deterministic(self):
        gen = QuestionGenerationService(ProviderConfig(use_mock_ai=True, api_key="ignored"))
        assert gen.mode == GenerationMode.DETERMINISTIC
        assert gen.provider is None

    def test_injected_provider_selects_provider_mode(self):
        gen = QuestionGenerationService(ProviderConfig(), provider=_provider("[]"))
        assert gen.mode == GenerationMode.PROVIDER

    def test_api_key_builds_groq_client(self):
        gen = QuestionGenerationService(ProviderConfig(api_key="gsk_test"))
        assert gen.mode == GenerationMode.PROVIDER
        assert gen.provider is not None

    def test_no_key_and_no_mock_is_unconfigured(self):
        gen = QuestionGenerationService(ProviderConfig())
        assert gen.mode == GenerationMode.UNCONFIGURED

    @pytest.mark.asyncio
    async def test_unconfigured_generate_raises(self):
        gen = QuestionGenerationService(ProviderConfig())
        with pytest.raises(ConfigurationError):
            await gen.generate(QuestionSpec.for_practice("Mid"))


class TestDeterministicMode:
    @pytest.mark.asyncio
    async def test_returns_fixed_set(self):
        gen = QuestionGenerationService(ProviderConfig(use_mock_ai=True))
        questions = await gen.generate(QuestionSpec.for_practice("Junior"))
        _assert_layout(questions)
        assert questions == fallback_questions(DifficultyLevel.MEDIUM)

    @pytest.mark.asyncio
    async def test_difficulty_echoed(self):
        gen = QuestionGenerationService(ProviderConfig(use_mock_ai=True))
        spec = QuestionSpec(level="Senior", config=GenerationConfig(difficulty=DifficultyLevel.HARD))
        questions = await gen.generate(spec)
        assert {q.difficulty for q in questions} == {DifficultyLevel.HARD}


class TestProviderMode:
    @pytest.mark.asyncio
    async def test_valid_json_is_used(self, provider_response, provider_questions):
        provider = _provider(provider_response)
        gen = QuestionGenerationService(ProviderConfig(), provider=provider)

        questions = await gen.generate(QuestionSpec.for_practice("Mid"))

        _assert_layout(questions)
        assert [q.text for q in questions] == [q["text"] for q in provider_questions]
        provider.generate_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fenced_json_is_used(self, provider_response, provider_questions):
        gen = QuestionGenerationService(
            ProviderConfig(), provider=_provider(f"Here they are:\n```json\n{provider_response}\n```")
        )
        questions = await gen.generate(QuestionSpec.for_practice("Mid"))
        assert questions[3].text == provider_questions[3]["text"]

    @pytest.mark.asyncio
    async def test_garbage_falls_back(self):
        gen = QuestionGenerationService(ProviderConfig(), provider=_provider("Sorry, I can't do that."))
        questions = await gen.generate(QuestionSpec.for_practice("Mid"))
        assert questions == fallback_questions()

    @pytest.mark.asyncio
    async def test_provider_error_falls_back(self):
        provider = _provider(side_effect=GenerationError("401 invalid api key"))
        gen = QuestionGenerationService(ProviderConfig(), provider=provider)
        questions = await gen.generate(QuestionSpec.for_practice("Mid"))
        assert questions == fallback_questions()

    @pytest.mark.asyncio
    async def test_unexpected_provider_exception_falls_back(self):
        provider = _provider(side_effect=ConnectionError("network down"))
        gen = QuestionGenerationService(ProviderConfig(), provider=provider)
        questions = await gen.generate(QuestionSpec.for_practice("Mid"))
        assert questions == fallback_questions()

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self):
        async def slow(prompt, temperature=None):
            await asyncio.sleep(5)
            return "[]"

        provider = AsyncMock()
        provider.generate_text = slow
        gen = QuestionGenerationService(ProviderConfig(timeout_seconds=0.01), provider=provider)
        questions = await gen.generate(QuestionSpec.for_practice("Mid"))
        assert questions == fallback_questions()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        "[]",
        "not json at all",
        "```json\n[{\"text\": \"only one\", \"type\": \"coding\"}]\n```",
        json.dumps([{"text": f"Q{i}", "type": "coding"} for i in range(9)]),
        json.dumps([{"text": "x"}] * 5),
        json.dumps(["a", "b", "c", "d", "e"]),
    ])
    async def test_layout_holds_for_any_output(self, response):
        gen = QuestionGenerationService(ProviderConfig(), provider=_provider(response))
        _assert_layout(await gen.generate(QuestionSpec.for_practice("Mid")))


class TestNormalization:
    def test_missing_type_inferred_from_category(self, provider_questions):
        del provider_questions[1]["type"]
        provider_questions[1]["category"] = "algorithms"
        del provider_questions[3]["type"]

        questions = normalize_questions(provider_questions, DifficultyLevel.MEDIUM)

        assert questions[1].text == provider_questions[1]["text"]
        assert questions[1].type == QuestionType.TECHNICAL
        assert questions[3].text == provider_questions[3]["text"]
        assert questions[3].type == QuestionType.CODING

    def test_uninferable_element_replaced_by_slot_fallback(self, provider_questions):
        del provider_questions[0]["type"]
        provider_questions[0]["category"] = "leadership"

        questions = normalize_questions(provider_questions, DifficultyLevel.MEDIUM)

        assert questions[0] == fallback_questions()[0]
        assert questions[1].text == provider_questions[1]["text"]

    def test_type_out_of_slot_replaced(self, provider_questions):
        provider_questions[4]["type"] = "behavioral"
        questions = normalize_questions(provider_questions, DifficultyLevel.MEDIUM)
        assert questions[4] == fallback_questions()[4]

    def test_ids_and_weights_forced_to_slot(self, provider_questions):
        for q in provider_questions:
            q["id"] = "x"
            q["weight"] = 10
        _assert_layout(normalize_questions(provider_questions, DifficultyLevel.MEDIUM))

    def test_defaults_filled(self):
        items = [
            {"text": "Tell me about yourself", "type": "behavioral"},
            {"text": "What is a hash map?", "type": "technical"},
            {"text": "What is a mutex?", "type": "TECHNICAL"},
            {"text": "Sum a list", "type": "coding", "difficulty": "extreme"},
            {"text": "Reverse a list", "type": "coding"},
        ]
        questions = normalize_questions(items, DifficultyLevel.EASY)
        _assert_layout(questions)
        assert all(q.category == "general" for q in questions)
        assert all(q.difficulty == DifficultyLevel.EASY for q in questions)

    def test_short_set_padded_and_long_set_truncated(self, provider_questions):
        short = normalize_questions(provider_questions[:2], DifficultyLevel.MEDIUM)
        _assert_layout(short)
        assert short[1].text == provider_questions[1]["text"]
        assert short[2:] == fallback_questions()[2:]

        long = normalize_questions(provider_questions + provider_questions, DifficultyLevel.MEDIUM)
        assert [q.text for q in long] == [q["text"] for q in provider_questions]

    def test_blank_text_rejected(self, provider_questions):
        provider_questions[2]["text"] = "   "
        questions = normalize_questions(provider_questions, DifficultyLevel.MEDIUM)
        assert questions[2] == fallback_questions()[2]


class TestPrompt:
    def test_practice_prompt(self):
        prompt = build_prompt(QuestionSpec.for_practice("Senior"))
        assert "Senior level software engineer position (practice interview)" in prompt
        assert "q5 = coding" in prompt
        assert "Job Description" not in prompt

    def test_job_prompt(self):
        job = Job(id="job-1", title="Backend Engineer", level="Mid", raw_description="Build APIs in Go")
        prompt = build_prompt(QuestionSpec.for_job(job))
        assert "Mid Backend Engineer position" in prompt
        assert "Build APIs in Go" in prompt
        assert '"difficulty": "medium"' in prompt
