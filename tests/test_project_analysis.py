"""
Tests for project structure analysis and technology stack detection
"""

import json
from dataclasses import replace

import pytest

from onboarding_tutor.services.project_analyzer import ProjectAnalyzer
from onboarding_tutor.services.tech_stack_detector import TechStackDetector


def write(path, content=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class TestProjectAnalyzer:
    def test_structure_is_relative_and_sorted(self, workspace, python_project):
        analysis = ProjectAnalyzer(workspace).analyze_sync()

        root = analysis.structure
        assert root.path == "."
        assert root.type == "directory"
        names = [child.name for child in root.children]
        assert names[0] == "src"
        assert names[1:] == sorted(names[1:])
        src = root.children[0]
        assert [c.path for c in src.children] == ["src/controllers", "src/models", "src/services"]
        assert src.children[0].children[0].path == "src/controllers/__init__.py"

    def test_excluded_and_hidden_entries_are_skipped(self, workspace, project_root):
        write(project_root / "node_modules" / "lib" / "index.js")
        write(project_root / ".git" / "HEAD")
        write(project_root / ".hidden")
        write(project_root / ".env.example", "KEY=")
        write(project_root / "app.py")

        names = [c.name for c in ProjectAnalyzer(workspace).analyze_sync().structure.children]

        assert names == [".env.example", "app.py"]

    def test_depth_limit(self, workspace, project_root):
        write(project_root / "a" / "b" / "c" / "deep.txt")
        config = replace(workspace, max_depth=2)

        root = ProjectAnalyzer(config).analyze_sync().structure
        b = root.children[0].children[0]

        assert b.path == "a/b"
        assert b.children == []

    def test_files_per_directory_limit(self, workspace, project_root):
        for n in range(10):
            write(project_root / f"file{n}.txt")
        config = replace(workspace, max_files_per_dir=3)

        root = ProjectAnalyzer(config).analyze_sync().structure

        assert len(root.children) == 3

    def test_total_entries_limit(self, workspace, project_root):
        for d in ("a", "b", "c"):
            for n in range(5):
                write(project_root / d / f"f{n}.txt")
        config = replace(workspace, max_total_files=7)

        root = ProjectAnalyzer(config).analyze_sync().structure

        def count(node):
            return sum(1 + count(c) for c in node.children or [])

        # a, a/f0..f4, then b is listed but not entered
        assert count(root) == 7
        assert [c.name for c in root.children] == ["a", "b"]
        assert root.children[1].children == []

    def test_directories_count_toward_total_limit(self, workspace, project_root):
        for i in range(20):
            for j in range(20):
                (project_root / f"d{i:02}" / f"e{j:02}").mkdir(parents=True)
        config = replace(workspace, max_total_files=30)

        root = ProjectAnalyzer(config).analyze_sync().structure

        def count(node):
            return sum(1 + count(c) for c in node.children or [])

        assert count(root) == 30

    def test_entry_points_patterns_conventions_key_files(self, workspace, python_project):
        analysis = ProjectAnalyzer(workspace).analyze_sync()

        assert analysis.entry_points == ["main.py"]
        assert set(analysis.key_files) == {"README.md", "Dockerfile"}
        patterns = {p.name: p for p in analysis.patterns}
        assert patterns["MVC"].confidence == pytest.approx(0.5)
        assert patterns["MVC"].indicators == ["src/controllers", "src/models"]
        assert "Service-based" not in patterns
        assert [c.description for c in analysis.conventions] == ["Ruff is configured for linting"]
        assert analysis.conventions[0].examples == ["pyproject.toml"]

    def test_feature_based_pattern_needs_one_indicator(self, workspace, project_root):
        (project_root / "features").mkdir()
        patterns = ProjectAnalyzer(workspace).analyze_sync().patterns

        assert [(p.name, p.confidence) for p in patterns] == [("Feature-based", 0.7)]

    def test_summary(self, workspace, python_project):
        summary = ProjectAnalyzer(workspace).analyze_sync().summary

        assert summary.startswith("## Project Structure\n```\n📁 project\n")
        assert "  📁 src\n" in summary
        assert "## Entry Points\n- main.py" in summary
        assert "- MVC (confidence: 50%)" in summary
        assert "## Key Files" in summary

    def test_summary_truncates_children(self, workspace, project_root):
        for n in range(5):
            write(project_root / f"f{n}.txt")
        config = replace(workspace, summary_max_children=2)

        summary = ProjectAnalyzer(config).analyze_sync().summary

        assert "  ... and 3 more\n" in summary
        assert "f2.txt" not in summary

    def test_empty_project(self, workspace):
        analysis = ProjectAnalyzer(workspace).analyze_sync()

        assert analysis.structure.children == []
        assert analysis.entry_points == []
        assert analysis.patterns == []
        assert "## Entry Points" not in analysis.summary

    @pytest.mark.asyncio
    async def test_analyze_runs_async(self, workspace, python_project):
        analysis = await ProjectAnalyzer(workspace).analyze()
        assert analysis.entry_points == ["main.py"]


class TestTechStackDetector:
    def test_package_json_dependencies(self, project_root):
        write(
            project_root / "package.json",
            json.dumps(
                {
                    "dependencies": {"react": "^18", "next": "14", "pg": "8"},
                    "devDependencies": {"vitest": "1", "typescript": "5"},
                }
            ),
        )

        detected = TechStackDetector(project_root).detect_technologies()

        assert detected == sorted(
            ["JavaScript", "React", "Next.js", "PostgreSQL", "Vitest", "TypeScript"]
        )

    def test_marker_files(self, python_project):
        write(python_project / "go.mod", "module demo")

        assert TechStackDetector(python_project).detect_technologies() == ["Docker", "Go", "Python"]

    def test_no_duplicates(self, project_root):
        write(project_root / "package.json", json.dumps({"devDependencies": {"typescript": "5"}}))
        write(project_root / "tsconfig.json", "{}")

        detected = TechStackDetector(project_root).detect_technologies()

        assert detected.count("TypeScript") == 1

    def test_unreadable_package_json_is_ignored(self, project_root):
        write(project_root / "package.json", "{broken")
        write(project_root / "Cargo.toml")

        assert TechStackDetector(project_root).detect_technologies() == ["Rust"]

    def test_summary(self, project_root):
        detector = TechStackDetector(project_root)
        assert detector.get_tech_stack_summary() == "No technologies detected"

        write(project_root / "pom.xml")
        assert detector.get_tech_stack_summary() == "Java"
