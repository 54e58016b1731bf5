"""
Skill-check quiz generation as a stream of progress events.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing

from onboarding_tutor.agents.exceptions import GenerationError, MissingInputError
from onboarding_tutor.agents.models import Quiz, QuizGenerationPhase, QuizGenerationProgress
from onboarding_tutor.agents.normalize import build_quiz
from onboarding_tutor.agents.prompts import QUIZ_SYSTEM_PROMPT, build_quiz_prompt
from onboarding_tutor.agents.prompts.locale import error_message, step
from onboarding_tutor.core.llm_client import LLMClient, get_llm_client
from onboarding_tutor.core.workspace import Clock, WorkspaceConfig, local_now
from onboarding_tutor.services.project_analyzer import ProjectAnalyzer
from onboarding_tutor.services.tech_stack_detector import TechStackDetector
from onboarding_tutor.utils.json_parser import extract_fenced_json

logger = logging.getLogger(__name__)

GENERATION_START_PERCENT = 40
GENERATION_MAX_PERCENT = 85
CHARS_PER_PERCENT = 30


def streaming_percent(response_length: int) -> int:
    return min(GENERATION_MAX_PERCENT, GENERATION_START_PERCENT + response_length // CHARS_PER_PERCENT)


class QuizGenerator:
    def __init__(
        self,
        config: WorkspaceConfig,
        llm_client_factory: Callable[[], LLMClient] = get_llm_client,
        analyzer: ProjectAnalyzer | None = None,
        detector: TechStackDetector | None = None,
        clock: Clock = local_now,
    ):
        self.config = config
        self.language = config.language
        self.llm_client_factory = llm_client_factory
        self.analyzer = analyzer or ProjectAnalyzer(config)
        self.detector = detector or TechStackDetector(config.root)
        self.clock = clock

    def _progress(
        self,
        phase: QuizGenerationPhase,
        percent: int,
        current_step: str,
        quiz: Quiz | None = None,
    ) -> QuizGenerationProgress:
        return QuizGenerationProgress(
            phase=phase, progress_percent=percent, current_step=current_step, quiz=quiz
        )

    def _error(self, error: Exception) -> QuizGenerationProgress:
        return QuizGenerationProgress(
            phase="error",
            progress_percent=0,
            current_step=step("error", self.language),
            error=str(error) or type(error).__name__,
        )

    async def generate(
        self, technologies: list[str], use_project_context: bool = False
    ) -> AsyncIterator[QuizGenerationProgress]:
        """
        Generate a quiz for the given technologies.

        An empty list means: detect the project's stack and keep the first few.
        If that still yields nothing, the stream ends with an error and the LLM
        is never called.
        """
        lang = self.language
        try:
            targets = list(technologies)
            if not targets:
                yield self._progress("detecting", 10, step("detecting_quiz_stack", lang))
                detected = await asyncio.to_thread(self.detector.detect_technologies)
                targets = detected[: self.config.quiz_max_technologies]

            if not targets:
                raise MissingInputError(error_message("no_technologies", lang))

            logger.info(f"📝 Generating quiz for: {', '.join(targets)}")
            yield self._progress(
                "detecting", 20, step("quiz_targets", lang, technologies=", ".join(targets))
            )

            project_context = ""
            if use_project_context:
                yield self._progress("detecting", 30, step("loading_context", lang))
                project_context = (await self.analyzer.analyze()).summary

            yield self._progress("generating", GENERATION_START_PERCENT, step("generating_quiz", lang))
            prompt = build_quiz_prompt(
                targets, project_context, self.config.quiz_question_count, lang
            )
            llm_client = self.llm_client_factory()

            response = ""
            stream = llm_client.create_message(
                QUIZ_SYSTEM_PROMPT[lang], [{"role": "user", "content": prompt}]
            )
            async with aclosing(stream):
                async for chunk in stream:
                    if not chunk.text:
                        continue
                    response += chunk.text
                    yield self._progress(
                        "generating", streaming_percent(len(response)), step("generating_quiz", lang)
                    )
            logger.info(f"🤖 Received quiz response ({len(response)} chars)")

            yield self._progress("generating", 90, step("parsing", lang))
            quiz = build_quiz(
                extract_fenced_json(response),
                targets,
                self.clock(),
                self.config.quiz_question_count,
                lang,
            )

            yield self._progress("completed", 100, step("completed", lang), quiz=quiz)

        except GenerationError as e:
            logger.warning(f"⚠️  Quiz generation failed: {e}")
            yield self._error(e)
        except Exception as e:
            logger.error(f"❌ Quiz generation failed: {e}", exc_info=True)
            yield self._error(e)
