"""
Exports a curriculum (and optionally its statistics) as Markdown or JSON.
"""

import json
import logging
import re
from datetime import datetime
from typing import Any, Literal

from onboarding_tutor.agents.models import Curriculum, LearningStatistics, TaskStatus
from onboarding_tutor.agents.prompts.locale import Language
from onboarding_tutor.core.workspace import Clock, local_now
from onboarding_tutor.utils.time_estimation import format_minutes

logger = logging.getLogger(__name__)

ExportFormat = Literal["markdown", "json"]

EXPORT_VERSION = "1.0"

CHECKBOXES: dict[str, str] = {
    "completed": "- [x]",
    "in_progress": "- [~]",
    "skipped": "- [-]",
    "not_started": "- [ ]",
}

# Everything outside ASCII alphanumerics, kana and common kanji becomes "_"
_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
_REPEATED_UNDERSCORES = re.compile(r"_+")

LABELS: dict[str, dict[str, str]] = {
    "ja": {
        "summary": "学習進捗サマリー",
        "completion": "完了率",
        "task_status": "タスク状況",
        "task_counts": "完了 {completed} / 進行中 {in_progress} / 未着手 {not_started} / スキップ {skipped}",
        "estimated": "推定時間",
        "actual": "実際の学習時間",
        "streak": "連続学習日数",
        "streak_value": "{days}日",
        "last_activity": "最終学習日",
        "project_summary": "プロジェクト概要",
        "curriculum": "カリキュラム",
        "chapter": "第{number}章: {title}",
        "estimated_time": "目安時間",
        "target_files": "関連ファイル",
        "created": "作成日",
        "updated": "最終更新",
    },
    "en": {
        "summary": "Learning Progress Summary",
        "completion": "Completion",
        "task_status": "Tasks",
        "task_counts": "completed {completed} / in progress {in_progress} / not started {not_started} / skipped {skipped}",
        "estimated": "Estimated time",
        "actual": "Actual learning time",
        "streak": "Learning streak",
        "streak_value": "{days} days",
        "last_activity": "Last activity",
        "project_summary": "Project Overview",
        "curriculum": "Curriculum",
        "chapter": "Chapter {number}: {title}",
        "estimated_time": "Estimated time",
        "target_files": "Related files",
        "created": "Created",
        "updated": "Last updated",
    },
}


def checkbox(status: TaskStatus) -> str:
    return CHECKBOXES.get(status, CHECKBOXES["not_started"])


def format_date(value: datetime, language: Language = "ja") -> str:
    if language == "en":
        return value.strftime("%B %d, %Y").replace(" 0", " ")
    return f"{value.year}年{value.month}月{value.day}日"


class CurriculumExporter:
    def __init__(self, language: Language = "ja", clock: Clock = local_now):
        self.language = language
        self.labels = LABELS[language]
        self.clock = clock

    def export_as_markdown(
        self, curriculum: Curriculum, statistics: LearningStatistics | None = None
    ) -> str:
        labels = self.labels
        lines = [f"# {curriculum.title}", "", curriculum.description, ""]

        if statistics is not None:
            lines += [f"## {labels['summary']}", ""]
            lines.append(f"- **{labels['completion']}**: {statistics.completion_percentage:.1f}%")
            counts = labels["task_counts"].format(
                completed=statistics.completed_tasks,
                in_progress=statistics.in_progress_tasks,
                not_started=statistics.not_started_tasks,
                skipped=statistics.skipped_tasks,
            )
            lines.append(f"- **{labels['task_status']}**: {counts}")
            lines.append(
                f"- **{labels['estimated']}**: "
                f"{format_minutes(statistics.estimated_total_minutes, self.language)}"
            )
            lines.append(
                f"- **{labels['actual']}**: "
                f"{format_minutes(statistics.actual_time_spent_minutes, self.language)}"
            )
            lines.append(
                f"- **{labels['streak']}**: {labels['streak_value'].format(days=statistics.streak_days)}"
            )
            if statistics.last_activity_time is not None:
                lines.append(
                    f"- **{labels['last_activity']}**: "
                    f"{format_date(statistics.last_activity_time, self.language)}"
                )
            lines.append("")

        if curriculum.project_summary:
            lines += [f"## {labels['project_summary']}", "", curriculum.project_summary, ""]

        lines += [f"## {labels['curriculum']}", ""]
        for chapter in curriculum.chapters:
            title = labels["chapter"].format(number=chapter.order + 1, title=chapter.title)
            lines += [f"### {title}", "", chapter.description, ""]

            for task in chapter.tasks:
                lines.append(f"{checkbox(task.status)} **{task.title}**")
                lines.append(f"  - {task.description}")
                if task.estimated_time:
                    lines.append(f"  - {labels['estimated_time']}: {task.estimated_time}")
                if task.target_files:
                    files = ", ".join(f"`{f}`" for f in task.target_files)
                    lines.append(f"  - {labels['target_files']}: {files}")
                lines.append("")

        lines += [
            "---",
            "",
            f"*{labels['created']}: {format_date(curriculum.created_at, self.language)}*",
            f"*{labels['updated']}: {format_date(curriculum.updated_at, self.language)}*",
        ]
        return "\n".join(lines)

    def export_as_json(
        self,
        curriculum: Curriculum,
        statistics: LearningStatistics | None = None,
        include_metadata: bool = True,
    ) -> str:
        export_data: dict[str, Any] = {
            "curriculum": curriculum.model_dump(
                mode="json", by_alias=True, exclude={"created_at", "updated_at"}
            )
        }
        if statistics is not None:
            export_data["statistics"] = statistics.model_dump(mode="json", by_alias=True)
        if include_metadata:
            export_data["metadata"] = {
                "exportedAt": self.clock().isoformat(),
                "createdAt": curriculum.created_at.isoformat(),
                "updatedAt": curriculum.updated_at.isoformat(),
                "version": EXPORT_VERSION,
            }
        return json.dumps(export_data, ensure_ascii=False, indent=2)

    def export(
        self,
        curriculum: Curriculum,
        fmt: ExportFormat,
        statistics: LearningStatistics | None = None,
    ) -> str:
        logger.info(f"📤 Exporting curriculum {curriculum.id} as {fmt}")
        if fmt == "markdown":
            return self.export_as_markdown(curriculum, statistics)
        return self.export_as_json(curriculum, statistics)

    def suggested_filename(self, curriculum: Curriculum, fmt: ExportFormat) -> str:
        sanitized = _FILENAME_UNSAFE.sub("_", curriculum.title)
        sanitized = _REPEATED_UNDERSCORES.sub("_", sanitized).strip("_")[:50]
        extension = "md" if fmt == "markdown" else "json"
        return f"curriculum_{sanitized}_{self.clock().date().isoformat()}.{extension}"
