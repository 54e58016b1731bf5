"""
Curriculum persistence and task status mutation.
"""

import logging

from onboarding_tutor.agents.models import Curriculum, LearningStatistics, Task, TaskStatus
from onboarding_tutor.core.workspace import (
    CURRICULUM_FILENAME,
    STATS_FILENAME,
    Clock,
    WorkspaceConfig,
    local_now,
)
from onboarding_tutor.services.json_store import JsonDocumentStore, LoadResult

logger = logging.getLogger(__name__)


class CurriculumStore:
    """Owns `curriculum.json`. Deleting it also clears the dependent time ledger."""

    def __init__(self, config: WorkspaceConfig, clock: Clock = local_now):
        self.config = config
        self.clock = clock
        self._store: JsonDocumentStore[Curriculum] = JsonDocumentStore(
            config.state_file(CURRICULUM_FILENAME), Curriculum
        )
        self._stats_store: JsonDocumentStore[LearningStatistics] = JsonDocumentStore(
            config.state_file(STATS_FILENAME), LearningStatistics
        )

    def save(self, curriculum: Curriculum) -> None:
        self._store.write(curriculum)
        logger.info(f"💾 Saved curriculum {curriculum.id} ({len(curriculum.chapters)} chapters)")

    def load(self) -> LoadResult[Curriculum]:
        return self._store.load()

    def exists(self) -> bool:
        return self._store.exists()

    def delete(self) -> None:
        self._store.delete()
        self._stats_store.delete()
        logger.info("🗑️  Deleted curriculum and its learning statistics")

    def find_task(self, task_id: str) -> Task | None:
        curriculum = self._store.read()
        return curriculum.find_task(task_id) if curriculum else None

    def update_task_status(self, task_id: str, status: TaskStatus) -> Curriculum | None:
        """
        Set a task's status and refresh `updatedAt`.

        Returns:
            The saved curriculum, or None when there is no curriculum or no such task
        """
        curriculum = self._store.read()
        if curriculum is None:
            logger.debug(f"No curriculum to update for task {task_id}")
            return None

        task = curriculum.find_task(task_id)
        if task is None:
            logger.warning(f"⚠️  Task {task_id} not found in curriculum {curriculum.id}")
            return None

        task.status = status
        curriculum.updated_at = self.clock()
        self._store.write(curriculum)
        logger.info(f"✅ Task {task_id} -> {status}")
        return curriculum
