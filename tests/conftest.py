"""
Pytest configuration and shared fixtures
"""
import json
from datetime import datetime, timedelta, timezone

import pytest

from onboarding_tutor.agents.models import Chapter, Curriculum, Quiz, QuizChoice, QuizQuestion, Task
from onboarding_tutor.core.llm_client import StreamChunk
from onboarding_tutor.core.workspace import WorkspaceConfig

JST = timezone(timedelta(hours=9))


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset singleton clients before each test"""
    import onboarding_tutor.core.llm_client
    import onboarding_tutor.services.groq_service

    monkeypatch.setattr(onboarding_tutor.core.llm_client, "_llm_client", None)
    monkeypatch.setattr(onboarding_tutor.services.groq_service, "_groq_service_instance", None)


class FakeClock:
    """Settable clock returning aware datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeLLMClient:
    """Streams canned text in chunks and records every request."""

    def __init__(self, chunks: list[str | None] | None = None, error: Exception | None = None):
        self.chunks = chunks or []
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    async def create_message(self, system_prompt, messages):
        self.calls.append({"system_prompt": system_prompt, "messages": messages})
        try:
            for text in self.chunks:
                yield StreamChunk(text=text)
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


def fenced(data) -> str:
    return f"Here you go:\n```json\n{json.dumps(data, ensure_ascii=False)}\n```\n"


def split_text(text: str, size: int = 40) -> list[str]:
    return [text[i : i + size] for i in range(0, len(text), size)]


CURRICULUM_PAYLOAD = {
    "title": "FastAPI入門",
    "description": "プロジェクトの全体像を学ぶ",
    "chapters": [
        {
            "title": "全体像",
            "description": "構造を知る",
            "tasks": [
                {
                    "title": "READMEを読む",
                    "description": "概要を把握する",
                    "targetFiles": ["README.md"],
                    "estimatedTime": "15分",
                },
                {"title": "エントリーポイント", "targetFiles": ["main.py"], "estimatedTime": "45分"},
            ],
        },
        {"title": "", "tasks": [{"description": "テストを実行する"}]},
    ],
}


def quiz_payload(count: int = 5, technology: str = "Python") -> dict:
    return {
        "questions": [
            {
                "technology": technology,
                "difficulty": "beginner",
                "questionText": f"Question {n}",
                "choices": [
                    {"id": "A", "text": "a", "isCorrect": False},
                    {"id": "B", "text": "b", "isCorrect": True},
                    {"id": "C", "text": "c", "isCorrect": False},
                    {"id": "D", "text": "d", "isCorrect": False},
                ],
                "explanation": f"Because {n}",
            }
            for n in range(1, count + 1)
        ]
    }


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 4, 10, 9, 0, tzinfo=JST))


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def workspace(project_root):
    return WorkspaceConfig(root=project_root)


@pytest.fixture
def python_project(project_root):
    """A small FastAPI-style project tree"""
    (project_root / "README.md").write_text("# Demo\n", encoding="utf-8")
    (project_root / "main.py").write_text("print('hi')\n", encoding="utf-8")
    (project_root / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.ruff]\nline-length = 100\n', encoding="utf-8"
    )
    (project_root / "Dockerfile").write_text("FROM python:3.12\n", encoding="utf-8")
    for name in ("services", "models", "controllers"):
        (project_root / "src" / name).mkdir(parents=True)
        (project_root / "src" / name / "__init__.py").write_text("", encoding="utf-8")
    return project_root


@pytest.fixture
def sample_curriculum(clock):
    now = clock()
    return Curriculum(
        id="cur-1",
        title="Demo Curriculum",
        description="Learn the demo project",
        project_summary="## Project Structure",
        chapters=[
            Chapter(
                id="ch-1",
                title="Basics",
                order=0,
                tasks=[
                    Task(id="t-1", title="Read README", estimated_time="15分", target_files=["README.md"]),
                    Task(id="t-2", title="Run app", estimated_time="45分"),
                ],
            ),
            Chapter(
                id="ch-2",
                title="Deep dive",
                order=1,
                tasks=[Task(id="t-3", title="Read services", estimated_time="about an hour")],
            ),
        ],
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sample_quiz(clock):
    def question(number: int, technology: str, correct: str) -> QuizQuestion:
        return QuizQuestion(
            id=f"q-{number}",
            question_number=number,
            technology=technology,
            difficulty="beginner",
            question_text=f"Question {number}",
            choices=[QuizChoice(id=c, text=c.lower(), is_correct=c == correct) for c in "ABCD"],
            explanation=f"Answer is {correct}",
        )

    return Quiz(
        id="quiz-1",
        questions=[
            question(1, "React", "A"),
            question(2, "React", "B"),
            question(3, "Python", "C"),
            question(4, "Python", "D"),
        ],
        target_technologies=["React", "Python"],
        created_at=clock(),
    )
