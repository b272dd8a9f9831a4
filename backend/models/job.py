from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

from models.interview import CamelModel, DifficultyLevel


class JobType(str, Enum):
    PRACTICE = "practice"
    REAL = "real"


class QuestionConfig(CamelModel):
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM


class Job(CamelModel):
    """Job posting as seen by the engine; created and listed elsewhere."""

    id: str
    job_type: JobType = JobType.REAL
    title: str
    level: str = "Mid"
    raw_description: str = ""
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    question_config: QuestionConfig = Field(default_factory=QuestionConfig)


class GenerationConfig(BaseModel):
    num_questions: int = Field(5, ge=5, le=5)
    technical_ratio: float = Field(0.6, ge=0.0, le=1.0)
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM


class QuestionSpec(BaseModel):
    """Input to question generation: a job, or just a level for practice."""

    level: str = "Mid"
    title: Optional[str] = None
    description: Optional[str] = None
    config: GenerationConfig = Field(default_factory=GenerationConfig)

    @property
    def is_practice(self) -> bool:
        return not self.title

    @classmethod
    def for_job(cls, job: Job) -> "QuestionSpec":
        return cls(
            level=job.level,
            title=job.title,
            description=job.raw_description,
            config=GenerationConfig(difficulty=job.question_config.difficulty),
        )

    @classmethod
    def for_practice(cls, level: str) -> "QuestionSpec":
        return cls(level=level)
