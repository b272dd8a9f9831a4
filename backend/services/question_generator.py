# services/question_generator.py
"""
Question generation for interview sessions.

Every call returns exactly five questions laid out as
behavioral, technical, technical, coding, coding (weights 1, 2, 2, 3, 3,
ids q1..q5). The provider's output is treated as untrusted text: anything
that cannot be extracted, parsed or validated is replaced by the
hand-authored fallback set, slot by slot or as a whole.
"""

import asyncio
import math
from enum import Enum
from typing import Any, Dict, List, Optional

from config import ProviderConfig
from models.interview import (
    DifficultyLevel, Question, QuestionType, QUESTION_LAYOUT, TYPE_WEIGHTS,
)
from models.job import QuestionSpec
from services.groq_service import GroqService, TextProvider
from utils.errors import ConfigurationError, GenerationError, ValidationError
from utils.llm_json import extract_json_array
from utils.logger import get_logger

logger = get_logger("QuestionGenerator")


class GenerationMode(str, Enum):
    UNCONFIGURED = "unconfigured"
    DETERMINISTIC = "deterministic"
    PROVIDER = "provider"


_FALLBACK_TEMPLATES = [
    {
        "text": "Tell me about a time when you had to work with a difficult team member. "
                "What was the situation and how did you handle it?",
        "category": "communication",
    },
    {
        "text": "What is the difference between SQL and NoSQL databases? When would you use each?",
        "category": "databases",
    },
    {
        "text": "Explain REST API principles in simple terms. What makes an API RESTful?",
        "category": "api-design",
    },
    {
        "text": "Write a function that takes an array of numbers and returns the sum of all numbers. "
                "Example: Input: [1, 2, 3, 4], Output: 10",
        "category": "coding",
    },
    {
        "text": "Write a function that checks if a string is a palindrome (reads the same forwards "
                "and backwards). Example: Input: \"racecar\", Output: true. Input: \"hello\", Output: false",
        "category": "coding",
    },
]


def fallback_questions(difficulty: DifficultyLevel = DifficultyLevel.MEDIUM) -> List[Question]:
    """The fixed deterministic set, tagged with the requested difficulty."""
    return [
        Question(
            id=f"q{i + 1}",
            text=tpl["text"],
            type=qtype,
            category=tpl["category"],
            difficulty=difficulty,
            weight=weight,
        )
        for i, (tpl, (qtype, weight)) in enumerate(zip(_FALLBACK_TEMPLATES, QUESTION_LAYOUT))
    ]


_STRUCTURE_RULES = """CRITICAL REQUIREMENTS (must follow exactly):
1) Output MUST be ONLY a valid JSON array. No markdown. No extra text.
2) Generate exactly:
   - 1 behavioral question (type = "behavioral")
   - 2 technical questions (type = "technical")
   - 2 coding questions (type = "coding")
3) IDs must be: q1, q2, q3, q4, q5.
4) Order MUST be:
   q1 = behavioral
   q2 = technical
   q3 = technical
   q4 = coding
   q5 = coding
5) Weight rules:
   - behavioral weight = 1
   - technical weight = 2
   - coding weight = 3
6) Difficulty must be "{difficulty}" for every question.
7) ALL questions must be ANSWERABLE IN 5 MINUTES OR LESS. Keep them concise and focused.

DEFINITIONS:
- behavioral: Simple, clear question about collaboration/communication/leadership. Answerable in 2-3 minutes.
- technical: Simple technical question answerable in 3-5 minutes. Focus on practical knowledge.
- coding: SIMPLE coding problem solvable in 5 minutes, beginner to intermediate level. MUST include a
  one-line problem statement and an input/output example. NO complex algorithms, NO system design.

CATEGORY FIELD RULES:
- behavioral categories: "communication" or "leadership" or "teamwork"
- technical categories: "algorithms" or "databases" or "networks" or "security" or "api-design" or "programming-concepts"
- coding categories: "coding"

Return ONLY this JSON array format:
[
  {{"id": "q1", "text": "...", "type": "behavioral", "category": "communication", "difficulty": "{difficulty}", "weight": 1}},
  {{"id": "q2", "text": "...", "type": "technical", "category": "algorithms", "difficulty": "{difficulty}", "weight": 2}},
  {{"id": "q3", "text": "...", "type": "technical", "category": "databases", "difficulty": "{difficulty}", "weight": 2}},
  {{"id": "q4", "text": "...", "type": "coding", "category": "coding", "difficulty": "{difficulty}", "weight": 3}},
  {{"id": "q5", "text": "...", "type": "coding", "category": "coding", "difficulty": "{difficulty}", "weight": 3}}
]"""


def build_prompt(spec: QuestionSpec) -> str:
    cfg = spec.config
    difficulty = cfg.difficulty.value
    num_technical = math.ceil(cfg.num_questions * cfg.technical_ratio)
    rules = _STRUCTURE_RULES.format(difficulty=difficulty)

    if spec.is_practice:
        return f"""You are an expert technical recruiter and interviewer.

Generate EXACTLY {cfg.num_questions} interview questions for a {spec.level} level software engineer position (practice interview).
About {num_technical} of them should test hands-on technical skill.

{rules}
"""

    return f"""You are an expert technical recruiter and interviewer.

Generate EXACTLY {cfg.num_questions} interview questions for a {spec.level} {spec.title} position.
About {num_technical} of them should test hands-on technical skill.

Job Description:
{spec.description or "(not provided)"}

{rules}

Questions must be specific to this role/level and not generic.
"""


def _resolve_type(raw: Dict[str, Any]) -> Optional[QuestionType]:
    """Explicit type if recognized, else inferred from category, else None."""
    declared = raw.get("type")
    if isinstance(declared, str):
        try:
            return QuestionType(declared.strip().lower())
        except ValueError:
            pass

    category = raw.get("category")
    if isinstance(category, str):
        c = category.strip().lower()
        if c == "coding":
            return QuestionType.CODING
        if "technical" in c or "algorithm" in c:
            return QuestionType.TECHNICAL
    return None


def _coerce(raw: Any, position: int, difficulty: DifficultyLevel) -> Optional[Question]:
    """Build a Question from one parsed element, or None if it must be rejected."""
    if not isinstance(raw, dict):
        return None
    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    qtype = _resolve_type(raw)
    if qtype is None:
        return None

    try:
        q_difficulty = DifficultyLevel(str(raw.get("difficulty", "")).strip().lower())
    except ValueError:
        q_difficulty = difficulty

    weight = raw.get("weight")
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight <= 0:
        weight = TYPE_WEIGHTS[qtype]

    category = raw.get("category")
    return Question(
        id=str(raw.get("id") or f"q{position + 1}"),
        text=text.strip(),
        type=qtype,
        category=category.strip() if isinstance(category, str) and category.strip() else "general",
        difficulty=q_difficulty,
        weight=weight,
    )


def check_composition(items: List[Any]) -> None:
    """Raise ValidationError if the parsed array is not 1 behavioral / 2 technical / 2 coding."""
    expected = [t for t, _ in QUESTION_LAYOUT]
    if len(items) != len(expected):
        raise ValidationError(f"Expected {len(expected)} questions, got {len(items)}")
    actual = [_resolve_type(i) if isinstance(i, dict) else None for i in items]
    if actual != expected:
        raise ValidationError(
            "Question types out of layout: "
            + ", ".join(t.value if t else "?" for t in actual)
        )


def normalize_questions(items: List[Any], difficulty: DifficultyLevel) -> List[Question]:
    """
    Map a parsed array onto the fixed five-slot layout.

    Rejected elements, missing positions and elements whose type does not
    match their slot are replaced by the fallback question for that slot.
    Ids and weights are always the slot's canonical values.
    """
    fallback = fallback_questions(difficulty)
    if len(items) > len(QUESTION_LAYOUT):
        logger.warning(f"⚠️ Dropping {len(items) - len(QUESTION_LAYOUT)} extra question(s)")

    result = []
    for n, (slot_type, slot_weight) in enumerate(QUESTION_LAYOUT):
        slot_id = f"q{n + 1}"
        raw = items[n] if n < len(items) else None
        q = _coerce(raw, n, difficulty) if raw is not None else None

        if q is None:
            logger.warning(f"⚠️ {slot_id}: missing or invalid element, using fallback question")
            result.append(fallback[n])
            continue
        if q.type != slot_type:
            logger.warning(
                f"⚠️ {slot_id}: expected {slot_type.value}, got {q.type.value}; using fallback question"
            )
            result.append(fallback[n])
            continue
        if q.id != slot_id or q.weight != slot_weight:
            logger.info(f"{slot_id}: normalized id/weight (was {q.id}/{q.weight})")
        result.append(q.model_copy(update={"id": slot_id, "weight": slot_weight}))
    return result


class QuestionGenerationService:
    """
    Produces the five-question set for a new interview.

    The mode is fixed at construction:
    - use_mock_ai → deterministic fallback set, no network
    - api key (or an injected provider) → one provider request per call
    - neither → every generate() raises ConfigurationError
    """

    def __init__(self, config: ProviderConfig, provider: Optional[TextProvider] = None):
        self.config = config
        self.provider: Optional[TextProvider] = None

        if config.use_mock_ai:
            self.mode = GenerationMode.DETERMINISTIC
            logger.info("⚠️ MOCK Mode: using deterministic questions (USE_MOCK_AI=true)")
        elif provider is not None or config.api_key:
            self.mode = GenerationMode.PROVIDER
            self.provider = provider or GroqService(config)
            logger.info("✅ AI Mode: provider configured and ready")
        else:
            self.mode = GenerationMode.UNCONFIGURED
            logger.error("❌ No GROQ_API_KEY found and USE_MOCK_AI is not set to true")

    async def generate(self, spec: QuestionSpec) -> List[Question]:
        difficulty = spec.config.difficulty

        if self.mode == GenerationMode.UNCONFIGURED:
            raise ConfigurationError("Groq not configured. Set GROQ_API_KEY or USE_MOCK_AI=true")

        if self.mode == GenerationMode.DETERMINISTIC:
            return fallback_questions(difficulty)

        label = "practice" if spec.is_practice else spec.title
        logger.info(f"🤖 Generating questions for: {label} ({spec.level}, {difficulty.value})")

        try:
            response = await self._request(build_prompt(spec))
            items = extract_json_array(response)
        except GenerationError as e:
            logger.error(f"❌ Question generation failed: {e.message}")
            logger.warning("Falling back to deterministic questions")
            return fallback_questions(difficulty)

        logger.info(f"✅ Parsed {len(items)} questions from provider")
        try:
            check_composition(items)
        except ValidationError as e:
            logger.warning(f"⚠️ Question set validation: {e.message}")

        questions = normalize_questions(items, difficulty)
        for q in questions:
            logger.debug(f"  {q.id}. [{q.type.value}] {q.text[:60]}")
        return questions

    async def _request(self, prompt: str) -> str:
        """Time-bounded provider call; every failure comes out as GenerationError."""
        try:
            return await asyncio.wait_for(
                self.provider.generate_text(prompt, temperature=self.config.temperature),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise GenerationError(
                f"Provider timed out after {self.config.timeout_seconds}s"
            ) from e
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Provider call failed: {e}") from e
