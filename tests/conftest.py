"""Shared fixtures and utilities for tests."""

import os

# Must be set before any backend module reads settings
os.environ.setdefault("USE_MOCK_AI", "false")
os.environ.setdefault("GROQ_API_KEY", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("REDIS_HOST", "localhost")

import json
from typing import Optional

import pytest
from fakeredis import FakeAsyncRedis, FakeServer

from config import ProviderConfig
from models.interview import Answer, AnswerEvaluation, Question
from services.interview_service import InterviewService
from services.interview_store import InterviewStore
from services.question_generator import QuestionGenerationService


VALID_PROVIDER_QUESTIONS = [
    {"id": "q1", "text": "Describe a time you led a project under pressure.", "type": "behavioral",
     "category": "leadership", "difficulty": "medium", "weight": 1},
    {"id": "q2", "text": "How does an index speed up a database query?", "type": "technical",
     "category": "databases", "difficulty": "medium", "weight": 2},
    {"id": "q3", "text": "What is the difference between TCP and UDP?", "type": "technical",
     "category": "networks", "difficulty": "medium", "weight": 2},
    {"id": "q4", "text": "Write a function to reverse a string. Input: 'abc', Output: 'cba'", "type": "coding",
     "category": "coding", "difficulty": "medium", "weight": 3},
    {"id": "q5", "text": "Find the maximum number in an array. Input: [1, 5, 3], Output: 5", "type": "coding",
     "category": "coding", "difficulty": "medium", "weight": 3},
]


@pytest.fixture
def provider_questions():
    return [dict(q) for q in VALID_PROVIDER_QUESTIONS]


@pytest.fixture
def provider_response(provider_questions):
    return json.dumps(provider_questions)


@pytest.fixture
def fake_redis():
    return FakeAsyncRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def store(fake_redis):
    return InterviewStore(fake_redis, ttl_seconds=3600, max_retries=10)


@pytest.fixture
def mock_generator():
    return QuestionGenerationService(ProviderConfig(use_mock_ai=True))


class StaticEvaluator:
    """Scores every answer with a fixed per-question evaluation."""

    def __init__(self, evaluations: dict):
        self.evaluations = evaluations
        self.calls = []

    async def evaluate(self, answer: Answer, question: Question) -> Optional[AnswerEvaluation]:
        self.calls.append(question.id)
        return self.evaluations.get(question.id)


@pytest.fixture
def service(store, mock_generator):
    return InterviewService(store, mock_generator)


@pytest.fixture
def make_evaluator():
    return StaticEvaluator
