"""
Pydantic models for the raw JSON the LLM returns.

These mirror the JSON contracts described in `onboarding_tutor/agents/prompts/`.
They are lenient on purpose: nulls are dropped, numbers are accepted where text
is expected, and unknown keys are ignored. Ids and ordering are never taken from
here; `normalize.py` assigns them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class LLMOutputModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class TaskOutput(LLMOutputModel):
    title: str = ""
    description: str = ""
    target_files: list[str] = Field(default_factory=list)
    estimated_time: str = ""
    prerequisites: list[str] = Field(default_factory=list)


class ChapterOutput(LLMOutputModel):
    title: str = ""
    description: str = ""
    tasks: list[TaskOutput] = Field(default_factory=list)


class CurriculumOutput(LLMOutputModel):
    title: str = ""
    description: str = ""
    chapters: list[ChapterOutput] = Field(default_factory=list)


class ChoiceOutput(LLMOutputModel):
    id: str = ""
    text: str = ""
    is_correct: bool = False

    @field_validator("is_correct", mode="before")
    @classmethod
    def only_literal_true(cls, v: Any) -> bool:
        return v is True


class QuestionOutput(LLMOutputModel):
    technology: str = ""
    difficulty: str = ""
    question_text: str = ""
    choices: list[ChoiceOutput] = Field(default_factory=list)
    explanation: str = ""


class QuizOutput(LLMOutputModel):
    questions: list[QuestionOutput]
