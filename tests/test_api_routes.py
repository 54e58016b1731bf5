"""
Tests for the HTTP API
"""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import CURRICULUM_PAYLOAD, FakeLLMClient, fenced, quiz_payload, split_text
from onboarding_tutor.api.dependencies import get_learning_service
from onboarding_tutor.services.learning_service import LearningService


@pytest.fixture
def fake_llm():
    return FakeLLMClient(split_text(fenced(CURRICULUM_PAYLOAD)))


@pytest.fixture
def learning_service(workspace, python_project, clock, fake_llm):
    return LearningService(workspace, lambda: fake_llm, clock=clock)


@pytest.fixture
def client(learning_service):
    """FastAPI test client with dependency overrides"""
    from onboarding_tutor.main import app

    app.dependency_overrides[get_learning_service] = lambda: learning_service
    yield TestClient(app)
    app.dependency_overrides.clear()


PROFILE_BODY = {
    "experienceLevel": "1_to_3_years",
    "primaryRole": "backend",
    "techStackProficiency": {"Python": "practical"},
    "learningGoal": "architecture",
    "learningStyle": "hands_on",
}


def read_ndjson(response):
    return [json.loads(line) for line in response.text.splitlines() if line]


def generate_curriculum(client):
    client.put("/api/profile", json=PROFILE_BODY)
    events = read_ndjson(client.post("/api/curriculum/generate", json={}))
    return events[-1]["curriculum"]


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestProfileRoutes:
    def test_profile_not_found(self, client):
        assert client.get("/api/profile").status_code == 404

    def test_save_and_get_profile(self, client, workspace):
        response = client.put("/api/profile", json=PROFILE_BODY)
        assert response.status_code == 200

        data = client.get("/api/profile").json()
        assert data == PROFILE_BODY
        assert (workspace.state_dir / "README.md").is_file()

    def test_init_environment(self, client, workspace):
        response = client.post("/api/profile/init")
        assert response.status_code == 200
        assert workspace.state_dir.is_dir()


class TestCurriculumRoutes:
    def test_generate_streams_ndjson(self, client):
        client.put("/api/profile", json=PROFILE_BODY)

        response = client.post("/api/curriculum/generate")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        events = read_ndjson(response)
        assert events[0] == {
            "phase": "analyzing",
            "progressPercent": 10,
            "currentStep": "プロジェクト構造を分析中...",
            "curriculum": None,
            "error": None,
        }
        assert events[-1]["phase"] == "completed"
        assert events[-1]["curriculum"]["chapters"][0]["tasks"][0]["status"] == "not_started"

    def test_generate_without_profile_ends_with_error(self, client, fake_llm):
        events = read_ndjson(client.post("/api/curriculum/generate", json={"forceRegenerate": True}))

        assert events[-1]["phase"] == "error"
        assert events[-1]["progressPercent"] == 0
        assert fake_llm.calls == []

    def test_get_curriculum(self, client):
        assert client.get("/api/curriculum").status_code == 404

        curriculum = generate_curriculum(client)
        response = client.get("/api/curriculum")

        assert response.status_code == 200
        assert response.json()["id"] == curriculum["id"]

    def test_update_task_status(self, client):
        curriculum = generate_curriculum(client)
        task_id = curriculum["chapters"][0]["tasks"][0]["id"]

        response = client.post(f"/api/curriculum/tasks/{task_id}/status", json={"status": "completed"})

        assert response.status_code == 200
        data = response.json()
        assert data["statistics"]["completedTasks"] == 1
        assert data["chapterProgress"][0]["completedTasks"] == 1

    def test_update_unknown_task(self, client):
        generate_curriculum(client)
        response = client.post("/api/curriculum/tasks/missing/status", json={"status": "completed"})
        assert response.status_code == 404

    def test_update_with_invalid_status(self, client):
        curriculum = generate_curriculum(client)
        task_id = curriculum["chapters"][0]["tasks"][0]["id"]

        response = client.post(f"/api/curriculum/tasks/{task_id}/status", json={"status": "done"})

        assert response.status_code == 422

    def test_statistics(self, client):
        assert client.get("/api/curriculum/statistics").status_code == 404

        generate_curriculum(client)
        data = client.get("/api/curriculum/statistics").json()

        assert data["statistics"]["totalTasks"] == 3
        assert len(data["chapterProgress"]) == 2

    def test_export(self, client):
        generate_curriculum(client)

        markdown = client.get("/api/curriculum/export").json()
        exported_json = client.get("/api/curriculum/export", params={"format": "json"}).json()

        assert markdown["format"] == "markdown"
        assert markdown["content"].startswith("# FastAPI入門")
        assert exported_json["filename"].endswith(".json")
        assert json.loads(exported_json["content"])["metadata"]["version"] == "1.0"

    def test_export_invalid_format(self, client):
        generate_curriculum(client)
        assert client.get("/api/curriculum/export", params={"format": "pdf"}).status_code == 422

    def test_open_task_file(self, client):
        response = client.post("/api/curriculum/tasks/t-1/open", json={"path": "README.md"})
        assert response.status_code == 200
        assert response.json()["path"].endswith("README.md")

        response = client.post("/api/curriculum/tasks/t-1/open", json={"path": "../../etc/passwd"})
        assert response.status_code == 400


class TestQuizRoutes:
    @pytest.fixture
    def fake_llm(self):
        return FakeLLMClient([fenced(quiz_payload(5, "Python"))])

    def test_technologies(self, client):
        data = client.get("/api/quiz/technologies").json()

        assert data["detected"] == ["Docker", "Python"]
        assert data["categories"]["Database"][0] == {"id": "postgresql", "name": "PostgreSQL", "category": "database"}

    def test_tech_stack(self, client):
        assert client.get("/api/quiz/tech-stack").json() == {"technologies": ["Docker", "Python"]}

    def test_generated_quiz_is_masked(self, client):
        response = client.post("/api/quiz/generate", json={"technologies": ["Python"]})

        assert "isCorrect" not in response.text
        assert "explanation" not in response.text
        events = read_ndjson(response)
        assert events[-1]["phase"] == "completed"
        assert len(events[-1]["quiz"]["questions"]) == 5

        stored = client.get("/api/quiz")
        assert stored.status_code == 200
        assert "isCorrect" not in stored.text

    def test_quiz_not_found(self, client):
        assert client.get("/api/quiz").status_code == 404

    def test_answer_and_complete(self, client):
        client.post("/api/quiz/generate", json={"technologies": ["Python"]})
        quiz = client.get("/api/quiz").json()

        assert client.post("/api/quiz/complete").status_code == 400

        for question in quiz["questions"]:
            response = client.post(
                "/api/quiz/answers",
                json={"quizId": quiz["id"], "questionId": question["id"], "selectedChoiceId": "B"},
            )
            assert response.status_code == 200
            assert response.json()["isCorrect"] is True
            assert response.json()["correctChoiceId"] == "B"

        data = client.post("/api/quiz/complete").json()

        assert data["result"]["overallLevel"] == "advanced"
        assert data["result"]["overallScore"] == 1.0
        assert data["suggestedProfile"]["experienceLevel"] == "3_to_5_years"
        assert data["proficiencyLabels"] == {"Python": "エキスパート"}

    def test_answer_unknown_question(self, client):
        client.post("/api/quiz/generate", json={"technologies": ["Python"]})
        quiz = client.get("/api/quiz").json()

        response = client.post(
            "/api/quiz/answers",
            json={"quizId": quiz["id"], "questionId": "missing", "selectedChoiceId": "A"},
        )

        assert response.status_code == 404


class TestWorkspaceDependency:
    def test_missing_workspace_root(self, monkeypatch):
        from fastapi import HTTPException

        from onboarding_tutor.config import get_settings

        monkeypatch.setattr(get_settings(), "workspace_root", None, raising=False)

        with pytest.raises(HTTPException) as exc_info:
            get_learning_service()

        assert exc_info.value.status_code == 400

    def test_configured_workspace_root(self, monkeypatch, project_root):
        from onboarding_tutor.config import get_settings

        monkeypatch.setattr(get_settings(), "workspace_root", project_root, raising=False)

        service = get_learning_service()

        assert service.config.root == project_root.resolve()
