"""
Technology stack detection from package.json dependencies and marker files.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Technology -> package.json dependency names that imply it
TECH_PATTERNS: dict[str, list[str]] = {
    "TypeScript": ["typescript"],
    "React": ["react", "react-dom"],
    "Vue": ["vue"],
    "Angular": ["@angular/core"],
    "Svelte": ["svelte"],
    "Next.js": ["next"],
    "Nuxt.js": ["nuxt"],
    "Node.js": ["express", "fastify", "koa", "hapi"],
    "NestJS": ["@nestjs/core"],
    "Django": ["django"],
    "Flask": ["flask"],
    "FastAPI": ["fastapi"],
    "Spring": ["spring-boot"],
    "PostgreSQL": ["pg", "postgres", "postgresql"],
    "MySQL": ["mysql", "mysql2"],
    "MongoDB": ["mongodb", "mongoose"],
    "Redis": ["redis", "ioredis"],
    "GraphQL": ["graphql", "apollo-server", "@apollo/client"],
    "Prisma": ["prisma", "@prisma/client"],
    "Tailwind": ["tailwindcss"],
    "Styled Components": ["styled-components"],
    "Jest": ["jest"],
    "Vitest": ["vitest"],
    "Mocha": ["mocha"],
    "Webpack": ["webpack"],
    "Vite": ["vite"],
    "esbuild": ["esbuild"],
}

# Marker file -> technology
MARKER_FILES: dict[str, str] = {
    "tsconfig.json": "TypeScript",
    "requirements.txt": "Python",
    "pyproject.toml": "Python",
    "go.mod": "Go",
    "Cargo.toml": "Rust",
    "pom.xml": "Java",
    "build.gradle": "Java",
    "build.gradle.kts": "Kotlin",
    "Dockerfile": "Docker",
    "docker-compose.yml": "Docker",
    "docker-compose.yaml": "Docker",
    ".dockerignore": "Docker",
}


class TechStackDetector:
    def __init__(self, root: Path):
        self.root = root

    def detect_technologies(self) -> list[str]:
        """
        Detect technologies used in the project.

        Returns:
            Sorted, de-duplicated technology names
        """
        technologies: set[str] = set()
        technologies |= self._detect_from_package_json()
        technologies |= self._detect_from_files()

        detected = sorted(technologies)
        logger.info(f"🔍 Detected {len(detected)} technologies: {', '.join(detected) or '-'}")
        return detected

    def get_tech_stack_summary(self) -> str:
        technologies = self.detect_technologies()
        if not technologies:
            return "No technologies detected"
        return ", ".join(technologies)

    def _detect_from_package_json(self) -> set[str]:
        package_json = self.root / "package.json"
        try:
            manifest = json.loads(package_json.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return set()
        except (OSError, ValueError) as e:
            logger.debug(f"Ignoring unreadable package.json: {e}")
            return set()

        if not isinstance(manifest, dict):
            return set()

        dependencies: set[str] = set()
        for key in ("dependencies", "devDependencies"):
            table = manifest.get(key)
            if isinstance(table, dict):
                dependencies.update(table)

        found = {"JavaScript"}
        for tech, names in TECH_PATTERNS.items():
            if any(name in dependencies for name in names):
                found.add(tech)
        return found

    def _detect_from_files(self) -> set[str]:
        return {tech for filename, tech in MARKER_FILES.items() if (self.root / filename).exists()}
