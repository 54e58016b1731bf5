"""
Project Analyzer Service
Walks the workspace and produces a bounded structural summary for prompts.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from onboarding_tutor.agents.models import (
    ArchitecturePattern,
    CodingConvention,
    DirectoryNode,
    ProjectAnalysis,
)
from onboarding_tutor.core.workspace import WorkspaceConfig

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        ".next",
        "__pycache__",
        ".venv",
        "venv",
        ".idea",
        ".vscode",
        "coverage",
        ".nyc_output",
        ".onboarding",
    }
)

ENTRY_POINT_CANDIDATES = [
    "src/index.ts",
    "src/index.js",
    "src/main.ts",
    "src/main.js",
    "src/App.tsx",
    "src/App.jsx",
    "src/app.ts",
    "src/app.js",
    "index.ts",
    "index.js",
    "main.py",
    "app.py",
    "main.go",
    "cmd/main.go",
    "src/extension.ts",
    "lib/index.ts",
    "lib/index.js",
]

KEY_FILE_NAMES = [
    "README.md",
    "package.json",
    "tsconfig.json",
    ".env.example",
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    "Makefile",
    "CONTRIBUTING.md",
    "ARCHITECTURE.md",
]


@dataclass(frozen=True)
class PatternRule:
    name: str
    indicators: tuple[str, ...]
    min_matches: int = 2
    fixed_confidence: float | None = None


PATTERN_RULES = [
    PatternRule("MVC", ("controllers", "models", "views", "routes")),
    PatternRule(
        "Clean Architecture",
        ("domain", "usecases", "infrastructure", "presentation", "application"),
    ),
    PatternRule("Feature-based", ("features", "modules"), min_matches=1, fixed_confidence=0.7),
    PatternRule("Component-based", ("components", "pages", "layouts", "hooks")),
    PatternRule("Service-based", ("services", "repositories", "providers")),
]


@dataclass(frozen=True)
class ConventionRule:
    category: str
    description: str
    filenames: tuple[str, ...]
    pyproject_table: str | None = None


CONVENTION_RULES = [
    ConventionRule(
        "linting",
        "ESLint is configured for code quality",
        (".eslintrc.js", ".eslintrc.json", ".eslintrc.yml", "eslint.config.js"),
    ),
    ConventionRule(
        "formatting",
        "Prettier is configured for code formatting",
        (".prettierrc", ".prettierrc.js", ".prettierrc.json", "prettier.config.js"),
    ),
    ConventionRule("typing", "TypeScript is used for type safety", ("tsconfig.json",)),
    ConventionRule("linting", "Biome is configured for linting and formatting", ("biome.json",)),
    ConventionRule(
        "linting",
        "Ruff is configured for linting",
        ("ruff.toml", ".ruff.toml"),
        pyproject_table="[tool.ruff",
    ),
    ConventionRule(
        "formatting", "Black is configured for code formatting", (), pyproject_table="[tool.black]"
    ),
    ConventionRule(
        "typing",
        "mypy is used for static type checking",
        ("mypy.ini", ".mypy.ini"),
        pyproject_table="[tool.mypy]",
    ),
    ConventionRule("formatting", "EditorConfig defines editor formatting rules", (".editorconfig",)),
]


class ProjectAnalyzer:
    """
    Read-only structural analysis of a workspace.

    The walk is bounded by depth, files per directory and total entries visited
    (directories count too), so the summary stays small regardless of project size.
    """

    def __init__(self, config: WorkspaceConfig):
        self.root = config.root
        self.max_depth = config.max_depth
        self.max_files_per_dir = config.max_files_per_dir
        self.max_total_files = config.max_total_files
        self.summary_max_children = config.summary_max_children
        self._total_files = 0
        self._visited = 0

    async def analyze(self) -> ProjectAnalysis:
        """Run the analysis in a worker thread."""
        return await asyncio.to_thread(self.analyze_sync)

    def analyze_sync(self) -> ProjectAnalysis:
        logger.info(f"🔍 Analyzing project structure: {self.root}")
        self._total_files = 0
        self._visited = 0

        structure = self._walk(self.root, 0)
        entry_points = self._detect_entry_points()
        patterns = self._detect_patterns()
        conventions = self._detect_conventions()
        key_files = self._find_key_files()
        summary = self.generate_summary(structure, entry_points, patterns, key_files)

        logger.info(
            f"✅ Analysis complete: {self._total_files} files, {len(entry_points)} entry points, "
            f"{len(patterns)} patterns, {len(conventions)} conventions"
        )
        return ProjectAnalysis(
            structure=structure,
            entry_points=entry_points,
            patterns=patterns,
            conventions=conventions,
            key_files=key_files,
            summary=summary,
        )

    # ===== Structure =====

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def _walk(self, directory: Path, depth: int) -> DirectoryNode:
        node = DirectoryNode(
            name=directory.name or str(directory),
            path=self._relative(directory),
            type="directory",
            children=[],
        )
        if depth >= self.max_depth or self._visited >= self.max_total_files:
            return node

        try:
            with os.scandir(directory) as it:
                entries = [(entry.name, entry.is_dir(follow_symlinks=False)) for entry in it]
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {directory}: {e}")
            return node

        entries.sort(key=lambda item: (not item[1], item[0]))

        file_count = 0
        for name, is_dir in entries:
            if name in EXCLUDED_DIRS:
                continue
            if name.startswith(".") and not name.startswith(".env"):
                continue
            if file_count >= self.max_files_per_dir or self._visited >= self.max_total_files:
                break

            path = directory / name
            self._visited += 1
            if is_dir:
                node.children.append(self._walk(path, depth + 1))
            else:
                node.children.append(
                    DirectoryNode(name=name, path=self._relative(path), type="file")
                )
                file_count += 1
                self._total_files += 1

        return node

    # ===== Detection =====

    def _detect_entry_points(self) -> list[str]:
        return [c for c in ENTRY_POINT_CANDIDATES if (self.root / c).is_file()]

    def _find_existing_dirs(self, names: tuple[str, ...]) -> list[str]:
        found = []
        for name in names:
            if (self.root / "src" / name).is_dir():
                found.append(f"src/{name}")
            elif (self.root / name).is_dir():
                found.append(name)
        return found

    def _detect_patterns(self) -> list[ArchitecturePattern]:
        patterns = []
        for rule in PATTERN_RULES:
            found = self._find_existing_dirs(rule.indicators)
            if len(found) < rule.min_matches:
                continue
            confidence = (
                rule.fixed_confidence
                if rule.fixed_confidence is not None
                else len(found) / len(rule.indicators)
            )
            patterns.append(
                ArchitecturePattern(name=rule.name, confidence=confidence, indicators=found)
            )
        return patterns

    def _read_pyproject(self) -> str:
        try:
            return (self.root / "pyproject.toml").read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return ""

    def _detect_conventions(self) -> list[CodingConvention]:
        pyproject = self._read_pyproject()
        conventions = []
        for rule in CONVENTION_RULES:
            example = next((f for f in rule.filenames if (self.root / f).exists()), None)
            if example is None and rule.pyproject_table and rule.pyproject_table in pyproject:
                example = "pyproject.toml"
            if example is not None:
                conventions.append(
                    CodingConvention(
                        category=rule.category, description=rule.description, examples=[example]
                    )
                )
        return conventions

    def _find_key_files(self) -> list[str]:
        return [name for name in KEY_FILE_NAMES if (self.root / name).exists()]

    # ===== Summary =====

    def generate_summary(
        self,
        structure: DirectoryNode,
        entry_points: list[str],
        patterns: list[ArchitecturePattern],
        key_files: list[str],
    ) -> str:
        lines = ["## Project Structure", "```", self.format_tree(structure), "```", ""]

        if entry_points:
            lines.append("## Entry Points")
            lines.extend(f"- {e}" for e in entry_points)
            lines.append("")

        if patterns:
            lines.append("## Detected Patterns")
            lines.extend(
                f"- {p.name} (confidence: {round(p.confidence * 100)}%)" for p in patterns
            )
            lines.append("")

        if key_files:
            lines.append("## Key Files")
            lines.extend(f"- {f}" for f in key_files)
            lines.append("")

        return "\n".join(lines)

    def format_tree(self, node: DirectoryNode, indent: int = 0) -> str:
        prefix = "  " * indent
        icon = "📁" if node.type == "directory" else "📄"
        result = f"{prefix}{icon} {node.name}\n"

        children = node.children or []
        for child in children[: self.summary_max_children]:
            result += self.format_tree(child, indent + 1)
        if len(children) > self.summary_max_children:
            result += f"{prefix}  ... and {len(children) - self.summary_max_children} more\n"
        return result
