"""
Tests for the learning service facade
"""

import pytest

from conftest import CURRICULUM_PAYLOAD, FakeLLMClient, fenced, quiz_payload, split_text
from onboarding_tutor.agents.models import UserProfile
from onboarding_tutor.core.workspace import CURRICULUM_FILENAME, QUIZ_FILENAME, STATS_FILENAME
from onboarding_tutor.services.learning_service import LearningService


class RecordingOpener:
    def __init__(self):
        self.opened = []

    def open_file(self, path):
        self.opened.append(path)


@pytest.fixture
def fake_llm():
    return FakeLLMClient(split_text(fenced(CURRICULUM_PAYLOAD)))


@pytest.fixture
def service(workspace, python_project, clock, fake_llm):
    service = LearningService(workspace, lambda: fake_llm, clock=clock, file_opener=RecordingOpener())
    service.save_profile(UserProfile(experience_level="less_than_1_year", primary_role="backend"))
    return service


async def collect(events):
    return [event async for event in events]


class TestCurriculumFlow:
    @pytest.mark.asyncio
    async def test_generate_saves_curriculum(self, service, workspace):
        events = await collect(service.generate_curriculum())

        assert events[-1].phase == "completed"
        assert workspace.state_file(CURRICULUM_FILENAME).is_file()
        assert service.get_curriculum().id == events[-1].curriculum.id

    @pytest.mark.asyncio
    async def test_existing_curriculum_is_returned(self, service, fake_llm):
        first = await collect(service.generate_curriculum())
        second = await collect(service.generate_curriculum())

        assert len(second) == 1
        assert second[0].phase == "completed"
        assert second[0].progress_percent == 100
        assert second[0].curriculum.id == first[-1].curriculum.id
        assert len(fake_llm.calls) == 1

    @pytest.mark.asyncio
    async def test_force_regenerate_replaces_curriculum(self, service, workspace, fake_llm):
        first = await collect(service.generate_curriculum())
        task_id = first[-1].curriculum.chapters[0].tasks[0].id
        service.update_task_progress(task_id, "in_progress")

        second = await collect(service.generate_curriculum(force_regenerate=True))

        assert second[-1].curriculum.id != first[-1].curriculum.id
        assert len(fake_llm.calls) == 2
        stats = service.get_statistics().statistics
        assert stats.curriculum_id == second[-1].curriculum.id
        assert stats.in_progress_tasks == 0

    @pytest.mark.asyncio
    async def test_failed_generation_saves_nothing(self, workspace, python_project, clock):
        service = LearningService(workspace, lambda: FakeLLMClient(["no json here"]), clock=clock)
        service.save_profile(UserProfile())

        events = await collect(service.generate_curriculum())

        assert events[-1].phase == "error"
        assert not workspace.state_file(CURRICULUM_FILENAME).exists()

    @pytest.mark.asyncio
    async def test_abandoned_stream_saves_nothing(self, service, workspace):
        events = service.generate_curriculum()
        async for event in events:
            if event.phase == "generating":
                break
        await events.aclose()

        assert not workspace.state_file(CURRICULUM_FILENAME).exists()

    @pytest.mark.asyncio
    async def test_task_progress_and_statistics(self, service, clock):
        curriculum = (await collect(service.generate_curriculum()))[-1].curriculum
        task_id = curriculum.chapters[0].tasks[0].id

        service.update_task_progress(task_id, "in_progress")
        clock.advance(minutes=20)
        update = service.update_task_progress(task_id, "completed")

        assert update.curriculum.find_task(task_id).status == "completed"
        assert update.statistics.actual_time_spent_minutes == 20
        assert update.chapter_progress[0].completed_tasks == 1
        view = service.get_statistics()
        assert view.statistics.completed_tasks == 1
        assert view.statistics.streak_days == 1

    @pytest.mark.asyncio
    async def test_unknown_task(self, service):
        await collect(service.generate_curriculum())
        assert service.update_task_progress("missing", "completed") is None

    def test_no_curriculum(self, service, workspace):
        assert service.get_curriculum() is None
        assert service.get_statistics() is None
        assert service.export_curriculum() is None
        assert not workspace.state_file(STATS_FILENAME).exists()

    @pytest.mark.asyncio
    async def test_export(self, service):
        await collect(service.generate_curriculum())

        markdown = service.export_curriculum("markdown")
        exported_json = service.export_curriculum("json", include_statistics=False)

        assert markdown.filename.endswith("2024-04-10.md")
        assert "## 学習進捗サマリー" in markdown.content
        assert '"statistics"' not in exported_json.content

    def test_open_task_file(self, service, python_project):
        opened = service.open_task_file("main.py")

        assert opened == (python_project / "main.py").resolve()
        assert service.file_opener.opened == [opened]

    def test_open_task_file_rejects_outside_paths(self, service, tmp_path):
        (tmp_path / "secret.txt").write_text("x", encoding="utf-8")

        assert service.open_task_file("../secret.txt") is None
        assert service.open_task_file("src") is None
        assert service.open_task_file("missing.py") is None
        assert service.file_opener.opened == []


class TestQuizFlow:
    @pytest.fixture
    def quiz_service(self, workspace, python_project, clock):
        fake = FakeLLMClient([fenced(quiz_payload(5, "Python"))])
        return LearningService(workspace, lambda: fake, clock=clock)

    @pytest.mark.asyncio
    async def test_full_quiz_flow(self, quiz_service, workspace):
        events = await collect(quiz_service.generate_quiz(["Python"]))
        assert events[-1].phase == "completed"
        assert workspace.state_file(QUIZ_FILENAME).is_file()

        public = quiz_service.get_public_quiz()
        assert "isCorrect" not in public.model_dump_json(by_alias=True)

        for question in public.questions[:4]:
            check = quiz_service.submit_quiz_answer(public.id, question.id, "B", 12)
            assert check.is_correct
            assert check.correct_choice_id == "B"
        quiz_service.submit_quiz_answer(public.id, public.questions[4].id, "A")

        completion = quiz_service.complete_quiz()

        assert completion.result.overall_score == pytest.approx(0.8)
        assert completion.result.proficiency_levels == {"Python": "practical"}
        assert completion.overall_level_label == "上級者"
        assert completion.proficiency_labels == {"Python": "実践レベル"}
        assert completion.suggested_profile.primary_role == "backend"
        assert quiz_service.quiz_store.load_result().exists

    @pytest.mark.asyncio
    async def test_unknown_question(self, quiz_service):
        await collect(quiz_service.generate_quiz(["Python"]))
        quiz_id = quiz_service.get_public_quiz().id

        assert quiz_service.submit_quiz_answer(quiz_id, "missing", "A") is None
        assert quiz_service.submit_quiz_answer("other", "missing", "A") is None
        assert quiz_service.quiz_store.get_answers() == []

    @pytest.mark.asyncio
    async def test_complete_requires_answers(self, quiz_service):
        assert quiz_service.complete_quiz() is None

        await collect(quiz_service.generate_quiz(["Python"]))
        assert quiz_service.complete_quiz() is None

    @pytest.mark.asyncio
    async def test_available_technologies(self, quiz_service):
        available = await quiz_service.get_available_technologies()

        assert available.detected == ["Docker", "Python"]
        assert "Backend" in available.categories
        assert await quiz_service.detect_tech_stack() == ["Docker", "Python"]


class TestProfile:
    def test_save_profile_initializes_environment(self, workspace, clock):
        service = LearningService(workspace, clock=clock)
        assert service.get_profile() is None

        service.save_profile(UserProfile(primary_role="devops"))

        assert (workspace.state_dir / ".gitignore").is_file()
        assert service.get_profile().primary_role == "devops"
