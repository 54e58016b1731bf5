"""
Learning statistics derived from a curriculum plus a persisted time ledger.

Count fields are recomputed from the curriculum on every call. Timing fields
(per-task minutes, total minutes, learning dates) survive recomputation by being
merged from the stored record of the same curriculum.
"""

import logging
from collections.abc import Iterable
from datetime import date, timedelta

from onboarding_tutor.agents.models import (
    ChapterProgress,
    Curriculum,
    TASK_STATUSES,
    LearningStatistics,
    TaskStatistic,
    TaskStatus,
)
from onboarding_tutor.core.workspace import STATS_FILENAME, Clock, WorkspaceConfig, local_now
from onboarding_tutor.services.json_store import JsonDocumentStore
from onboarding_tutor.utils.time_estimation import parse_estimated_minutes

logger = logging.getLogger(__name__)


def calculate_streak(dates: Iterable[date], today: date) -> int:
    """
    Count consecutive learning days ending today or yesterday.

    Returns 0 when the most recent date is older than yesterday.
    """
    ordered = sorted(set(dates), reverse=True)
    if not ordered:
        return 0
    if ordered[0] not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    for current, previous in zip(ordered, ordered[1:]):
        if (current - previous).days != 1:
            break
        streak += 1
    return streak


def _percentage(done: int, total: int) -> float:
    return done / total * 100 if total > 0 else 0.0


class LearningStatisticsService:
    def __init__(self, config: WorkspaceConfig, clock: Clock = local_now):
        self.clock = clock
        self._store: JsonDocumentStore[LearningStatistics] = JsonDocumentStore(
            config.state_file(STATS_FILENAME), LearningStatistics
        )

    def load_statistics(self) -> LearningStatistics | None:
        return self._store.read()

    def save_statistics(self, statistics: LearningStatistics) -> None:
        self._store.write(statistics)

    def calculate_from_curriculum(self, curriculum: Curriculum) -> LearningStatistics:
        """Fresh count-based statistics. Timing fields start empty."""
        tasks = list(curriculum.iter_tasks())
        counts = {status: 0 for status in TASK_STATUSES}
        for task in tasks:
            counts[task.status] += 1

        return LearningStatistics(
            curriculum_id=curriculum.id,
            total_tasks=len(tasks),
            completed_tasks=counts["completed"],
            in_progress_tasks=counts["in_progress"],
            skipped_tasks=counts["skipped"],
            not_started_tasks=counts["not_started"],
            estimated_total_minutes=sum(parse_estimated_minutes(t.estimated_time) for t in tasks),
            completion_percentage=_percentage(counts["completed"], len(tasks)),
            last_activity_time=curriculum.updated_at,
        )

    def _merged(
        self, curriculum: Curriculum, stored: LearningStatistics | None
    ) -> LearningStatistics:
        fresh = self.calculate_from_curriculum(curriculum)
        if stored is not None and stored.curriculum_id == curriculum.id:
            fresh.task_stats = stored.task_stats
            fresh.actual_time_spent_minutes = stored.actual_time_spent_minutes
            fresh.learning_dates = stored.learning_dates
            fresh.last_activity_time = stored.last_activity_time or fresh.last_activity_time
        return fresh

    def get_or_create_statistics(self, curriculum: Curriculum) -> LearningStatistics:
        """
        Current statistics for a curriculum.

        An existing record of the same curriculum is recomputed in memory and
        not rewritten. Otherwise a fresh record is created and saved.
        """
        stored = self._store.read()
        if stored is not None and stored.curriculum_id == curriculum.id:
            stats = self._merged(curriculum, stored)
            stats.streak_days = calculate_streak(stats.learning_dates, self.clock().date())
            return stats

        stats = self.calculate_from_curriculum(curriculum)
        self._store.write(stats)
        logger.info(f"📊 Created learning statistics for curriculum {curriculum.id}")
        return stats

    def update_task_statistics(
        self,
        task_id: str,
        old_status: TaskStatus,
        new_status: TaskStatus,
        curriculum: Curriculum,
    ) -> LearningStatistics:
        """
        Apply a task status transition to the time ledger and save.

        Entering in_progress stamps startedAt. in_progress -> completed stamps
        completedAt and adds the elapsed minutes. Today is always recorded.
        """
        stats = self._merged(curriculum, self._store.read())
        now = self.clock()

        task_stat = stats.find_task_stat(task_id)
        if task_stat is None:
            task_stat = TaskStatistic(task_id=task_id)
            stats.task_stats.append(task_stat)

        if new_status == "in_progress" and old_status != "in_progress":
            task_stat.started_at = now
        elif new_status == "completed" and old_status == "in_progress":
            task_stat.completed_at = now
            if task_stat.started_at is not None:
                minutes = round((now - task_stat.started_at).total_seconds() / 60)
                task_stat.time_spent_minutes += minutes
                stats.actual_time_spent_minutes += minutes
                logger.info(f"⏱️  Task {task_id} took {minutes} min")

        self._record_today(stats, now.date())
        stats.last_activity_time = now
        self._store.write(stats)
        return stats

    def record_activity(self, curriculum: Curriculum) -> LearningStatistics:
        """Record today as a learning day without any task transition."""
        stats = self.get_or_create_statistics(curriculum)
        now = self.clock()
        if now.date() not in stats.learning_dates:
            self._record_today(stats, now.date())
            stats.last_activity_time = now
            self._store.write(stats)
        return stats

    def get_chapter_progress(self, curriculum: Curriculum) -> list[ChapterProgress]:
        progress = []
        for chapter in curriculum.chapters:
            completed = sum(1 for t in chapter.tasks if t.status == "completed")
            progress.append(
                ChapterProgress(
                    chapter_id=chapter.id,
                    chapter_title=chapter.title,
                    total_tasks=len(chapter.tasks),
                    completed_tasks=completed,
                    progress_percentage=_percentage(completed, len(chapter.tasks)),
                )
            )
        return progress

    @staticmethod
    def _record_today(stats: LearningStatistics, today: date) -> None:
        stats.learning_dates = sorted(set(stats.learning_dates) | {today})
        stats.streak_days = calculate_streak(stats.learning_dates, today)
