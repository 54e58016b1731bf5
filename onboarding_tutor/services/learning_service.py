"""
Learning Service
Wires the learning components for one workspace and implements the operations
the HTTP API exposes.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from pathlib import Path
from typing import Protocol

from pydantic import Field

from onboarding_tutor.agents.curriculum_generator import CurriculumGenerator
from onboarding_tutor.agents.models import (
    TECHNOLOGY_CATEGORIES,
    AnswerCheck,
    AvailableTechnology,
    CamelModel,
    ChapterProgress,
    Curriculum,
    GenerationProgress,
    LearningStatistics,
    PublicQuiz,
    QuizAnswer,
    QuizGenerationProgress,
    QuizResult,
    TaskStatus,
    UserProfile,
)
from onboarding_tutor.agents.prompts.locale import step
from onboarding_tutor.agents.quiz_generator import QuizGenerator
from onboarding_tutor.core.llm_client import LLMClient, get_llm_client
from onboarding_tutor.core.workspace import Clock, WorkspaceConfig, local_now
from onboarding_tutor.services.curriculum_exporter import CurriculumExporter, ExportFormat
from onboarding_tutor.services.curriculum_store import CurriculumStore
from onboarding_tutor.services.onboarding_environment import OnboardingEnvironment
from onboarding_tutor.services.profile_store import ProfileStore
from onboarding_tutor.services.project_analyzer import ProjectAnalyzer
from onboarding_tutor.services.quiz_result_analyzer import (
    QuizResultAnalyzer,
    overall_level_label,
    proficiency_label,
)
from onboarding_tutor.services.quiz_store import QuizStore
from onboarding_tutor.services.statistics_service import LearningStatisticsService
from onboarding_tutor.services.tech_stack_detector import TechStackDetector

logger = logging.getLogger(__name__)


class FileOpener(Protocol):
    def open_file(self, path: Path) -> None: ...


class LoggingFileOpener:
    """Default opener: records the request. Editors plug in their own opener."""

    def open_file(self, path: Path) -> None:
        logger.info(f"📂 Open file requested: {path}")


# ===== Responses =====


class TaskProgressUpdate(CamelModel):
    curriculum: Curriculum
    statistics: LearningStatistics
    chapter_progress: list[ChapterProgress]


class StatisticsView(CamelModel):
    statistics: LearningStatistics
    chapter_progress: list[ChapterProgress]


class CurriculumExport(CamelModel):
    format: ExportFormat
    filename: str
    content: str


class QuizCompletion(CamelModel):
    result: QuizResult
    suggested_profile: UserProfile
    overall_level_label: str
    proficiency_labels: dict[str, str] = Field(default_factory=dict)


class AvailableTechnologies(CamelModel):
    categories: dict[str, list[AvailableTechnology]]
    detected: list[str]


class LearningService:
    def __init__(
        self,
        config: WorkspaceConfig,
        llm_client_factory: Callable[[], LLMClient] = get_llm_client,
        clock: Clock = local_now,
        file_opener: FileOpener | None = None,
    ):
        self.config = config
        self.language = config.language
        self.clock = clock
        self.file_opener = file_opener or LoggingFileOpener()

        self.analyzer = ProjectAnalyzer(config)
        self.detector = TechStackDetector(config.root)
        self.profile_store = ProfileStore(config)
        self.curriculum_store = CurriculumStore(config, clock)
        self.quiz_store = QuizStore(config)
        self.statistics = LearningStatisticsService(config, clock)
        self.result_analyzer = QuizResultAnalyzer(clock)
        self.exporter = CurriculumExporter(config.language, clock)
        self.environment = OnboardingEnvironment(config)

        self.curriculum_generator = CurriculumGenerator(
            config,
            llm_client_factory,
            analyzer=self.analyzer,
            detector=self.detector,
            profile_store=self.profile_store,
            clock=clock,
        )
        self.quiz_generator = QuizGenerator(
            config, llm_client_factory, analyzer=self.analyzer, detector=self.detector, clock=clock
        )

    # ===== Curriculum =====

    async def generate_curriculum(
        self, force_regenerate: bool = False
    ) -> AsyncIterator[GenerationProgress]:
        """
        Stream curriculum generation, persisting the result on completion.

        Without `force_regenerate` an existing curriculum is returned as a single
        completed event. With it, the old curriculum and its statistics are
        deleted first.
        """
        if force_regenerate:
            self.curriculum_store.delete()
        else:
            existing = self.curriculum_store.load()
            if existing.exists:
                logger.info(f"📚 Returning existing curriculum {existing.document.id}")
                yield GenerationProgress(
                    phase="completed",
                    progress_percent=100,
                    current_step=step("existing_curriculum", self.language),
                    curriculum=existing.document,
                )
                return

        async with aclosing(self.curriculum_generator.generate()) as events:
            async for progress in events:
                if progress.phase == "completed" and progress.curriculum is not None:
                    self.curriculum_store.save(progress.curriculum)
                yield progress
                if progress.is_terminal:
                    break

    def get_curriculum(self) -> Curriculum | None:
        curriculum = self.curriculum_store.load().document
        if curriculum is not None:
            self.statistics.record_activity(curriculum)
        return curriculum

    def update_task_progress(self, task_id: str, status: TaskStatus) -> TaskProgressUpdate | None:
        """
        Change a task's status and update the time ledger.

        Returns:
            The updated curriculum with statistics, or None if the task is unknown
        """
        task = self.curriculum_store.find_task(task_id)
        old_status: TaskStatus = task.status if task else "not_started"

        curriculum = self.curriculum_store.update_task_status(task_id, status)
        if curriculum is None:
            return None

        statistics = self.statistics.update_task_statistics(task_id, old_status, status, curriculum)
        return TaskProgressUpdate(
            curriculum=curriculum,
            statistics=statistics,
            chapter_progress=self.statistics.get_chapter_progress(curriculum),
        )

    def get_statistics(self) -> StatisticsView | None:
        curriculum = self.curriculum_store.load().document
        if curriculum is None:
            return None
        return StatisticsView(
            statistics=self.statistics.get_or_create_statistics(curriculum),
            chapter_progress=self.statistics.get_chapter_progress(curriculum),
        )

    def export_curriculum(
        self, fmt: ExportFormat = "markdown", include_statistics: bool = True
    ) -> CurriculumExport | None:
        curriculum = self.curriculum_store.load().document
        if curriculum is None:
            return None
        statistics = (
            self.statistics.get_or_create_statistics(curriculum) if include_statistics else None
        )
        return CurriculumExport(
            format=fmt,
            filename=self.exporter.suggested_filename(curriculum, fmt),
            content=self.exporter.export(curriculum, fmt, statistics),
        )

    def open_task_file(self, relative_path: str) -> Path | None:
        """
        Ask the file opener to show a workspace file.

        Returns:
            The resolved path, or None if it is outside the workspace or missing
        """
        root = self.config.root.resolve()
        target = (root / relative_path).resolve()
        if not target.is_relative_to(root):
            logger.warning(f"⚠️  Refusing to open path outside the workspace: {relative_path}")
            return None
        if not target.is_file():
            logger.warning(f"⚠️  File not found: {relative_path}")
            return None

        self.file_opener.open_file(target)
        return target

    # ===== Quiz =====

    async def generate_quiz(
        self, technologies: list[str], use_project_context: bool = False
    ) -> AsyncIterator[QuizGenerationProgress]:
        """Stream quiz generation, saving the quiz on completion."""
        events = self.quiz_generator.generate(technologies, use_project_context)
        async with aclosing(events):
            async for progress in events:
                if progress.phase == "completed" and progress.quiz is not None:
                    self.quiz_store.save_quiz(progress.quiz)
                yield progress
                if progress.is_terminal:
                    break

    def get_public_quiz(self) -> PublicQuiz | None:
        quiz = self.quiz_store.load_quiz().document
        return quiz.to_public() if quiz else None

    def submit_quiz_answer(
        self,
        quiz_id: str,
        question_id: str,
        selected_choice_id: str,
        time_spent_seconds: int = 0,
    ) -> AnswerCheck | None:
        """Check an answer, then record it. None when the quiz or question is unknown."""
        check = self.quiz_store.check_answer(quiz_id, question_id, selected_choice_id)
        if check is None:
            return None

        self.quiz_store.record_answer(
            QuizAnswer(
                question_id=question_id,
                selected_choice_id=selected_choice_id,
                is_correct=check.is_correct,
                time_spent_seconds=time_spent_seconds,
            )
        )
        logger.info(f"📝 Answer to {question_id}: {'correct' if check.is_correct else 'incorrect'}")
        return check

    def complete_quiz(self) -> QuizCompletion | None:
        quiz = self.quiz_store.load_quiz().document
        answers = self.quiz_store.get_answers()
        if quiz is None or not answers:
            logger.warning("⚠️  Cannot complete quiz: no quiz or no answers recorded")
            return None

        result = self.result_analyzer.analyze(quiz, answers)
        self.quiz_store.save_result(result)
        return QuizCompletion(
            result=result,
            suggested_profile=self.result_analyzer.generate_suggested_profile(result),
            overall_level_label=overall_level_label(result.overall_level, self.language),
            proficiency_labels={
                tech: proficiency_label(level, self.language)
                for tech, level in result.proficiency_levels.items()
            },
        )

    async def detect_tech_stack(self) -> list[str]:
        return await asyncio.to_thread(self.detector.detect_technologies)

    async def get_available_technologies(self) -> AvailableTechnologies:
        return AvailableTechnologies(
            categories=TECHNOLOGY_CATEGORIES, detected=await self.detect_tech_stack()
        )

    # ===== Profile =====

    def get_profile(self) -> UserProfile | None:
        return self.profile_store.load_profile()

    def save_profile(self, profile: UserProfile) -> None:
        self.environment.initialize()
        self.profile_store.save_profile(profile)

    def init_environment(self) -> None:
        self.environment.initialize()
