"""
Tests for the learning document models
"""

import json

from onboarding_tutor.agents.models import (
    Curriculum,
    LearningStatistics,
    QuizGenerationProgress,
    UserProfile,
)


class TestSerialization:
    def test_curriculum_uses_camel_case_keys(self, sample_curriculum):
        data = json.loads(sample_curriculum.to_json())

        assert "projectSummary" in data
        assert "createdAt" in data
        task = data["chapters"][0]["tasks"][0]
        assert task["targetFiles"] == ["README.md"]
        assert task["estimatedTime"] == "15分"

    def test_round_trip_through_aliases(self, sample_curriculum):
        restored = Curriculum.model_validate_json(sample_curriculum.to_json())
        assert restored == sample_curriculum

    def test_snake_case_input_is_accepted(self):
        profile = UserProfile(primary_role="backend")
        assert profile.model_dump(by_alias=True)["primaryRole"] == "backend"

    def test_statistics_dates_serialize_as_iso(self):
        stats = LearningStatistics.model_validate(
            {"curriculumId": "c", "learningDates": ["2024-04-09", "2024-04-10"]}
        )
        assert json.loads(stats.to_json())["learningDates"] == ["2024-04-09", "2024-04-10"]

    def test_find_task(self, sample_curriculum):
        assert sample_curriculum.find_task("t-3").title == "Read services"
        assert sample_curriculum.find_task("missing") is None


class TestPublicQuiz:
    def test_public_projection_has_no_answers(self, sample_quiz):
        public = sample_quiz.to_public()
        raw = public.model_dump_json(by_alias=True)

        assert "isCorrect" not in raw
        assert "explanation" not in raw
        assert [q.id for q in public.questions] == [q.id for q in sample_quiz.questions]
        assert [c.id for c in public.questions[0].choices] == ["A", "B", "C", "D"]

    def test_progress_projection_masks_quiz(self, sample_quiz):
        progress = QuizGenerationProgress(
            phase="completed", progress_percent=100, current_step="done", quiz=sample_quiz
        )
        public = progress.to_public()

        assert progress.is_terminal
        assert public.quiz.id == sample_quiz.id
        assert "isCorrect" not in public.model_dump_json(by_alias=True)

    def test_correct_choice(self, sample_quiz):
        assert sample_quiz.find_question("q-2").correct_choice.id == "B"
