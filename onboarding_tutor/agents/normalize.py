"""
Turns parsed LLM output into curriculum and quiz documents.

Every chapter, task, question and quiz gets a fresh uuid4 regardless of what the
model emitted. Quizzes are repaired so each question has exactly four choices
(ids A-D) with exactly one correct, and padded or truncated to the configured
question count.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, get_args

from pydantic import ValidationError

from onboarding_tutor.agents.exceptions import JSONParseError
from onboarding_tutor.agents.models import (
    CHOICE_IDS,
    Chapter,
    Curriculum,
    Quiz,
    QuizChoice,
    QuizDifficulty,
    QuizQuestion,
    Task,
)
from onboarding_tutor.agents.prompts.locale import Language, error_message
from onboarding_tutor.agents.pydantic_models import (
    ChoiceOutput,
    CurriculumOutput,
    QuestionOutput,
    QuizOutput,
)

logger = logging.getLogger(__name__)

VALID_DIFFICULTIES: tuple[str, ...] = get_args(QuizDifficulty)
DEFAULT_DIFFICULTY: QuizDifficulty = "intermediate"

CURRICULUM_DEFAULTS: dict[str, dict[str, str]] = {
    "ja": {
        "title": "学習カリキュラム",
        "chapter_title": "第{number}章",
        "task_title": "タスク",
        "estimated_time": "30分",
    },
    "en": {
        "title": "Learning Curriculum",
        "chapter_title": "Chapter {number}",
        "task_title": "Task",
        "estimated_time": "30 min",
    },
}

PLACEHOLDERS: dict[str, dict[str, str]] = {
    "ja": {
        "question": "{technology}に関する質問{number}",
        "choice": "選択肢{choice_id}",
        "explanation": "この問題は自動生成されたプレースホルダーです。",
    },
    "en": {
        "question": "Question {number} about {technology}",
        "choice": "Choice {choice_id}",
        "explanation": "This question is an automatically generated placeholder.",
    },
}


def new_id() -> str:
    return str(uuid.uuid4())


# ===== Curriculum =====


def build_curriculum(
    data: Any, project_summary: str, now: datetime, language: Language = "ja"
) -> Curriculum:
    """
    Build a curriculum from parsed JSON.

    Raises:
        JSONParseError: If the JSON does not have the curriculum shape
    """
    try:
        output = CurriculumOutput.model_validate(data)
    except ValidationError as e:
        raise JSONParseError(f"Unexpected curriculum structure: {e.error_count()} errors") from e

    defaults = CURRICULUM_DEFAULTS[language]
    chapters = [
        Chapter(
            id=new_id(),
            title=chapter.title or defaults["chapter_title"].format(number=index + 1),
            description=chapter.description,
            order=index,
            tasks=[
                Task(
                    id=new_id(),
                    title=task.title or defaults["task_title"],
                    description=task.description,
                    status="not_started",
                    target_files=task.target_files,
                    estimated_time=task.estimated_time or defaults["estimated_time"],
                    prerequisites=task.prerequisites,
                )
                for task in chapter.tasks
            ],
        )
        for index, chapter in enumerate(output.chapters)
    ]

    curriculum = Curriculum(
        id=new_id(),
        title=output.title or defaults["title"],
        description=output.description,
        project_summary=project_summary,
        chapters=chapters,
        created_at=now,
        updated_at=now,
    )
    logger.info(
        f"✅ Built curriculum '{curriculum.title}': {len(chapters)} chapters, "
        f"{sum(len(c.tasks) for c in chapters)} tasks"
    )
    return curriculum


# ===== Quiz =====


def repair_correct_choice(choices: list[QuizChoice]) -> list[QuizChoice]:
    """
    Leave exactly one correct choice.

    No correct choice: the first becomes correct. Several: only the first
    correct one is kept.
    """
    first_correct = next((i for i, c in enumerate(choices) if c.is_correct), 0)
    for index, choice in enumerate(choices):
        choice.is_correct = index == first_correct
    return choices


def normalize_choices(raw_choices: list[ChoiceOutput], language: Language = "ja") -> list[QuizChoice]:
    """Exactly four choices, ids A-D by position, one correct."""
    choices = []
    for index, choice_id in enumerate(CHOICE_IDS):
        if index < len(raw_choices):
            raw = raw_choices[index]
            choices.append(QuizChoice(id=choice_id, text=raw.text, is_correct=raw.is_correct))
        else:
            choices.append(
                QuizChoice(
                    id=choice_id,
                    text=PLACEHOLDERS[language]["choice"].format(choice_id=choice_id),
                )
            )
    if len(raw_choices) != len(CHOICE_IDS):
        logger.debug(f"Normalized {len(raw_choices)} choices to {len(CHOICE_IDS)}")
    return repair_correct_choice(choices)


def normalize_difficulty(difficulty: str) -> QuizDifficulty:
    return difficulty if difficulty in VALID_DIFFICULTIES else DEFAULT_DIFFICULTY


def placeholder_difficulty(question_number: int) -> QuizDifficulty:
    if question_number <= 2:
        return "beginner"
    if question_number <= 4:
        return "intermediate"
    return "advanced"


def placeholder_question(
    question_number: int, technologies: list[str], language: Language = "ja"
) -> QuizQuestion:
    technology = (
        technologies[question_number % len(technologies)] if technologies else "General"
    ) or "General"
    texts = PLACEHOLDERS[language]
    return QuizQuestion(
        id=new_id(),
        question_number=question_number,
        technology=technology,
        difficulty=placeholder_difficulty(question_number),
        question_text=texts["question"].format(technology=technology, number=question_number),
        choices=[
            QuizChoice(
                id=choice_id,
                text=texts["choice"].format(choice_id=choice_id),
                is_correct=choice_id == CHOICE_IDS[0],
            )
            for choice_id in CHOICE_IDS
        ],
        explanation=texts["explanation"],
    )


def _build_question(
    raw: QuestionOutput, question_number: int, technologies: list[str], language: Language
) -> QuizQuestion:
    return QuizQuestion(
        id=new_id(),
        question_number=question_number,
        technology=raw.technology or (technologies[0] if technologies else "General"),
        difficulty=normalize_difficulty(raw.difficulty),
        question_text=raw.question_text,
        choices=normalize_choices(raw.choices, language),
        explanation=raw.explanation,
    )


def build_quiz(
    data: Any,
    technologies: list[str],
    now: datetime,
    question_count: int = 5,
    language: Language = "ja",
) -> Quiz:
    """
    Build a quiz of exactly `question_count` questions from parsed JSON.

    Raises:
        JSONParseError: If there is no question list, or it has the wrong shape
    """
    if not isinstance(data, dict) or not isinstance(data.get("questions"), list):
        raise JSONParseError(error_message("no_questions", language))

    try:
        output = QuizOutput.model_validate(data)
    except ValidationError as e:
        raise JSONParseError(f"Unexpected quiz structure: {e.error_count()} errors") from e

    questions = [
        _build_question(raw, number, technologies, language)
        for number, raw in enumerate(output.questions[:question_count], start=1)
    ]
    generated = len(questions)
    while len(questions) < question_count:
        questions.append(placeholder_question(len(questions) + 1, technologies, language))
    if generated < question_count:
        logger.warning(f"⚠️  Model produced {generated} questions, padded to {question_count}")

    quiz = Quiz(
        id=new_id(),
        questions=questions,
        target_technologies=list(technologies),
        created_at=now,
    )
    logger.info(f"✅ Built quiz with {len(questions)} questions for {', '.join(technologies)}")
    return quiz
