"""
Curriculum generation as a stream of progress events.

analyzing (10, 30, 40) -> generating (50..90 while streaming, 95 parsing)
-> completed (100). Any failure ends the stream with a single error event.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing

from onboarding_tutor.agents.exceptions import GenerationError, MissingInputError
from onboarding_tutor.agents.models import Curriculum, GenerationPhase, GenerationProgress
from onboarding_tutor.agents.normalize import build_curriculum
from onboarding_tutor.agents.prompts import CURRICULUM_SYSTEM_PROMPT, build_curriculum_prompt
from onboarding_tutor.agents.prompts.locale import error_message, step
from onboarding_tutor.core.llm_client import LLMClient, get_llm_client
from onboarding_tutor.core.workspace import Clock, WorkspaceConfig, local_now
from onboarding_tutor.services.profile_store import ProfileStore
from onboarding_tutor.services.project_analyzer import ProjectAnalyzer
from onboarding_tutor.services.tech_stack_detector import TechStackDetector
from onboarding_tutor.utils.json_parser import extract_fenced_json

logger = logging.getLogger(__name__)

GENERATION_START_PERCENT = 50
GENERATION_MAX_PERCENT = 90
CHARS_PER_PERCENT = 50


def streaming_percent(response_length: int) -> int:
    return min(GENERATION_MAX_PERCENT, GENERATION_START_PERCENT + response_length // CHARS_PER_PERCENT)


class CurriculumGenerator:
    def __init__(
        self,
        config: WorkspaceConfig,
        llm_client_factory: Callable[[], LLMClient] = get_llm_client,
        analyzer: ProjectAnalyzer | None = None,
        detector: TechStackDetector | None = None,
        profile_store: ProfileStore | None = None,
        clock: Clock = local_now,
    ):
        self.config = config
        self.language = config.language
        self.llm_client_factory = llm_client_factory
        self.analyzer = analyzer or ProjectAnalyzer(config)
        self.detector = detector or TechStackDetector(config.root)
        self.profile_store = profile_store or ProfileStore(config)
        self.clock = clock

    def _progress(
        self,
        phase: GenerationPhase,
        percent: int,
        step_key: str,
        curriculum: Curriculum | None = None,
    ) -> GenerationProgress:
        return GenerationProgress(
            phase=phase,
            progress_percent=percent,
            current_step=step(step_key, self.language),
            curriculum=curriculum,
        )

    def _error(self, error: Exception) -> GenerationProgress:
        return GenerationProgress(
            phase="error",
            progress_percent=0,
            current_step=step("error", self.language),
            error=str(error) or type(error).__name__,
        )

    async def generate(self) -> AsyncIterator[GenerationProgress]:
        """
        Generate a curriculum for the workspace.

        Yields:
            GenerationProgress events; the last one is `completed` (carrying the
            curriculum) or `error`
        """
        logger.info(f"📚 Starting curriculum generation for {self.config.root}")
        try:
            yield self._progress("analyzing", 10, "analyzing_structure")
            analysis = await self.analyzer.analyze()

            yield self._progress("analyzing", 30, "detecting_stack")
            technologies = await asyncio.to_thread(self.detector.detect_technologies)

            yield self._progress("analyzing", 40, "loading_profile")
            profile = self.profile_store.load_profile()
            if profile is None:
                raise MissingInputError(error_message("no_profile", self.language))

            yield self._progress("generating", GENERATION_START_PERCENT, "generating_curriculum")
            prompt = build_curriculum_prompt(analysis.summary, technologies, profile, self.language)
            llm_client = self.llm_client_factory()

            response = ""
            stream = llm_client.create_message(
                CURRICULUM_SYSTEM_PROMPT[self.language], [{"role": "user", "content": prompt}]
            )
            async with aclosing(stream):
                async for chunk in stream:
                    if not chunk.text:
                        continue
                    response += chunk.text
                    yield self._progress(
                        "generating", streaming_percent(len(response)), "generating_curriculum"
                    )
            logger.info(f"🤖 Received curriculum response ({len(response)} chars)")

            yield self._progress("generating", 95, "parsing")
            curriculum = build_curriculum(
                extract_fenced_json(response), analysis.summary, self.clock(), self.language
            )

            yield self._progress("completed", 100, "completed", curriculum=curriculum)

        except GenerationError as e:
            logger.warning(f"⚠️  Curriculum generation failed: {e}")
            yield self._error(e)
        except Exception as e:
            logger.error(f"❌ Curriculum generation failed: {e}", exc_info=True)
            yield self._error(e)
