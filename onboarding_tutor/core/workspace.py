"""
Workspace configuration shared by every learning component.

Components receive a WorkspaceConfig at construction instead of looking up the
current workspace on their own.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Literal

from onboarding_tutor.config import Settings

logger = logging.getLogger(__name__)

CURRICULUM_FILENAME = "curriculum.json"
QUIZ_FILENAME = "quiz.json"
QUIZ_ANSWERS_FILENAME = "quiz-answers.json"
QUIZ_RESULT_FILENAME = "quiz-result.json"
STATS_FILENAME = "learning-stats.json"
PROFILE_FILENAME = "user_profile.json"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


@dataclass(frozen=True)
class WorkspaceConfig:
    """Paths and limits for one onboarding workspace."""

    root: Path
    state_dir_name: str = ".onboarding"
    language: Literal["ja", "en"] = "ja"
    max_depth: int = 4
    max_files_per_dir: int = 50
    max_total_files: int = 500
    summary_max_children: int = 15
    quiz_question_count: int = 5
    quiz_max_technologies: int = 5

    @property
    def state_dir(self) -> Path:
        return self.root / self.state_dir_name

    def state_file(self, filename: str) -> Path:
        return self.state_dir / filename

    @classmethod
    def from_settings(cls, settings: Settings, root: Path | None = None) -> "WorkspaceConfig":
        """
        Build a workspace config from application settings.

        Raises:
            ValueError: If no workspace root is configured
        """
        workspace_root = root or settings.workspace_root
        if workspace_root is None:
            raise ValueError("No workspace path available. Set WORKSPACE_ROOT.")

        config = cls(
            root=Path(workspace_root).expanduser().resolve(),
            state_dir_name=settings.state_dir_name,
            language=settings.content_language,
            max_depth=settings.analyzer_max_depth,
            max_files_per_dir=settings.analyzer_max_files_per_dir,
            max_total_files=settings.analyzer_max_total_files,
            summary_max_children=settings.summary_max_children,
            quiz_question_count=settings.quiz_question_count,
            quiz_max_technologies=settings.quiz_max_technologies,
        )
        logger.debug(f"Workspace config: root={config.root}, state_dir={config.state_dir}")
        return config
