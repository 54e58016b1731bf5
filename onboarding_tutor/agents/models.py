"""
Pydantic models for every persisted learning document and progress event.

Documents are stored as camelCase JSON (`model_dump(by_alias=True)`), so the
files under the state directory stay readable by other tooling.
"""

from collections.abc import Iterator
from datetime import date, datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TaskStatus = Literal["not_started", "in_progress", "completed", "skipped"]
TASK_STATUSES: tuple[str, ...] = get_args(TaskStatus)

ProficiencyLevel = Literal["no_experience", "basic", "practical", "expert"]
QuizDifficulty = Literal["beginner", "intermediate", "advanced"]
OverallLevel = Literal["beginner", "intermediate", "advanced"]

GenerationPhase = Literal["analyzing", "generating", "completed", "error"]
QuizGenerationPhase = Literal["detecting", "generating", "completed", "error"]

CHOICE_IDS: tuple[str, ...] = ("A", "B", "C", "D")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


# ===== Curriculum =====


class Task(CamelModel):
    id: str
    title: str
    description: str = ""
    status: TaskStatus = "not_started"
    target_files: list[str] = Field(default_factory=list)
    estimated_time: str = Field(default="30分", description="Free-text duration, e.g. '30分'")
    prerequisites: list[str] = Field(
        default_factory=list, description="Task ids, advisory only"
    )


class Chapter(CamelModel):
    id: str
    title: str
    description: str = ""
    order: int = Field(description="0-based position in generation order")
    tasks: list[Task] = Field(default_factory=list)


class Curriculum(CamelModel):
    id: str
    title: str
    description: str = ""
    project_summary: str = ""
    chapters: list[Chapter] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    def iter_tasks(self) -> Iterator[Task]:
        for chapter in self.chapters:
            yield from chapter.tasks

    def find_task(self, task_id: str) -> Task | None:
        for task in self.iter_tasks():
            if task.id == task_id:
                return task
        return None


# ===== Project analysis =====


class DirectoryNode(CamelModel):
    name: str
    path: str
    type: Literal["file", "directory"]
    children: list["DirectoryNode"] | None = None


class ArchitecturePattern(CamelModel):
    name: str
    confidence: float = Field(ge=0, le=1)
    indicators: list[str] = Field(default_factory=list)


class CodingConvention(CamelModel):
    category: str  # "linting", "formatting", "typing"
    description: str
    examples: list[str] = Field(default_factory=list)


class ProjectAnalysis(CamelModel):
    structure: DirectoryNode
    entry_points: list[str] = Field(default_factory=list)
    patterns: list[ArchitecturePattern] = Field(default_factory=list)
    conventions: list[CodingConvention] = Field(default_factory=list)
    key_files: list[str] = Field(default_factory=list)
    summary: str = ""


# ===== Learning statistics =====


class TaskStatistic(CamelModel):
    task_id: str
    started_at: datetime | None = None
    completed_at: datetime | None = None
    time_spent_minutes: int = 0


class LearningStatistics(CamelModel):
    curriculum_id: str
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    skipped_tasks: int = 0
    not_started_tasks: int = 0
    estimated_total_minutes: int = 0
    actual_time_spent_minutes: int = 0
    task_stats: list[TaskStatistic] = Field(default_factory=list)
    last_activity_time: datetime | None = None
    completion_percentage: float = 0.0
    streak_days: int = 0
    learning_dates: list[date] = Field(default_factory=list)

    def find_task_stat(self, task_id: str) -> TaskStatistic | None:
        return next((ts for ts in self.task_stats if ts.task_id == task_id), None)


class ChapterProgress(CamelModel):
    chapter_id: str
    chapter_title: str
    total_tasks: int
    completed_tasks: int
    progress_percentage: float


# ===== Quiz =====


class QuizChoice(CamelModel):
    id: str
    text: str = ""
    is_correct: bool = False


class QuizQuestion(CamelModel):
    id: str
    question_number: int = Field(ge=1)
    technology: str
    difficulty: QuizDifficulty = "intermediate"
    question_text: str = ""
    choices: list[QuizChoice] = Field(default_factory=list)
    explanation: str = ""

    @property
    def correct_choice(self) -> QuizChoice | None:
        return next((c for c in self.choices if c.is_correct), None)


class PublicQuizChoice(CamelModel):
    """Client-facing choice. Has no correctness field."""

    id: str
    text: str


class PublicQuizQuestion(CamelModel):
    """Client-facing question. Correct answer and explanation are withheld."""

    id: str
    question_number: int
    technology: str
    difficulty: QuizDifficulty
    question_text: str
    choices: list[PublicQuizChoice]


class PublicQuiz(CamelModel):
    id: str
    questions: list[PublicQuizQuestion]
    target_technologies: list[str]
    created_at: datetime


class Quiz(CamelModel):
    id: str
    questions: list[QuizQuestion] = Field(default_factory=list)
    target_technologies: list[str] = Field(default_factory=list)
    created_at: datetime

    def find_question(self, question_id: str) -> QuizQuestion | None:
        return next((q for q in self.questions if q.id == question_id), None)

    def to_public(self) -> PublicQuiz:
        return PublicQuiz(
            id=self.id,
            questions=[
                PublicQuizQuestion(
                    id=q.id,
                    question_number=q.question_number,
                    technology=q.technology,
                    difficulty=q.difficulty,
                    question_text=q.question_text,
                    choices=[PublicQuizChoice(id=c.id, text=c.text) for c in q.choices],
                )
                for q in self.questions
            ],
            target_technologies=list(self.target_technologies),
            created_at=self.created_at,
        )


class QuizAnswer(CamelModel):
    question_id: str
    selected_choice_id: str
    is_correct: bool
    time_spent_seconds: int = 0


class AnswerCheck(CamelModel):
    is_correct: bool
    correct_choice_id: str
    explanation: str


class QuizResult(CamelModel):
    quiz_id: str
    answers: list[QuizAnswer] = Field(default_factory=list)
    proficiency_levels: dict[str, ProficiencyLevel] = Field(default_factory=dict)
    overall_level: OverallLevel
    overall_score: float = Field(ge=0, le=1)
    completed_at: datetime


# ===== User profile =====


class UserProfile(CamelModel):
    experience_level: str = ""  # less_than_1_year | 1_to_3_years | 3_to_5_years | more_than_5_years
    primary_role: str = ""  # frontend | backend | fullstack | mobile | devops | other
    tech_stack_proficiency: dict[str, str] = Field(default_factory=dict)
    learning_goal: str = ""  # overview | feature_development | architecture | code_review
    learning_style: str = ""  # theory | hands_on | sample_code


# ===== Progress events =====


class GenerationProgress(CamelModel):
    phase: GenerationPhase
    progress_percent: int = Field(ge=0, le=100)
    current_step: str
    curriculum: Curriculum | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.phase in ("completed", "error")


class PublicQuizGenerationProgress(CamelModel):
    phase: QuizGenerationPhase
    progress_percent: int
    current_step: str
    quiz: PublicQuiz | None = None
    error: str | None = None


class QuizGenerationProgress(CamelModel):
    phase: QuizGenerationPhase
    progress_percent: int = Field(ge=0, le=100)
    current_step: str
    quiz: Quiz | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.phase in ("completed", "error")

    def to_public(self) -> PublicQuizGenerationProgress:
        return PublicQuizGenerationProgress(
            phase=self.phase,
            progress_percent=self.progress_percent,
            current_step=self.current_step,
            quiz=self.quiz.to_public() if self.quiz else None,
            error=self.error,
        )


# ===== Technology selection =====


class AvailableTechnology(CamelModel):
    id: str
    name: str
    category: str  # "frontend", "backend", "infrastructure", ...


TECHNOLOGY_CATEGORIES: dict[str, list[AvailableTechnology]] = {
    "JavaScript/TypeScript": [
        AvailableTechnology(id="react", name="React", category="frontend"),
        AvailableTechnology(id="vue", name="Vue.js", category="frontend"),
        AvailableTechnology(id="angular", name="Angular", category="frontend"),
        AvailableTechnology(id="nextjs", name="Next.js", category="frontend"),
        AvailableTechnology(id="nodejs", name="Node.js", category="backend"),
        AvailableTechnology(id="typescript", name="TypeScript", category="language"),
        AvailableTechnology(id="javascript", name="JavaScript", category="language"),
    ],
    "Backend": [
        AvailableTechnology(id="python", name="Python", category="language"),
        AvailableTechnology(id="go", name="Go", category="language"),
        AvailableTechnology(id="java", name="Java", category="language"),
        AvailableTechnology(id="rust", name="Rust", category="language"),
        AvailableTechnology(id="csharp", name="C#", category="language"),
    ],
    "Infrastructure/DevOps": [
        AvailableTechnology(id="docker", name="Docker", category="infrastructure"),
        AvailableTechnology(id="kubernetes", name="Kubernetes", category="infrastructure"),
        AvailableTechnology(id="aws", name="AWS", category="cloud"),
        AvailableTechnology(id="gcp", name="GCP", category="cloud"),
        AvailableTechnology(id="terraform", name="Terraform", category="infrastructure"),
    ],
    "Database": [
        AvailableTechnology(id="postgresql", name="PostgreSQL", category="database"),
        AvailableTechnology(id="mysql", name="MySQL", category="database"),
        AvailableTechnology(id="mongodb", name="MongoDB", category="database"),
        AvailableTechnology(id="redis", name="Redis", category="database"),
    ],
}
