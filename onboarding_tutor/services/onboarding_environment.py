"""
Creates and removes the per-workspace state directory.
"""

import logging
import shutil

from onboarding_tutor.core.workspace import PROFILE_FILENAME, WorkspaceConfig

logger = logging.getLogger(__name__)

GITIGNORE_CONTENT = f"""# Onboarding personal data - do not commit
{PROFILE_FILENAME}
user_progress.json

# Generated files
*.log
"""

README_CONTENT = f"""# Onboarding Environment

This directory is used by the codebase onboarding tutor for learning activities.

## Contents

- `{PROFILE_FILENAME}` - Your learning profile (not committed to git)
- `curriculum.json` - Your generated learning curriculum
- `learning-stats.json` - Your learning progress and time records
- `quiz.json`, `quiz-answers.json`, `quiz-result.json` - Skill check quiz state

## Note

Personal data files are excluded from git via `.gitignore`.
"""


class OnboardingEnvironment:
    def __init__(self, config: WorkspaceConfig):
        self.path = config.state_dir

    def initialize(self) -> None:
        """Create the state directory with its .gitignore and README."""
        self.path.mkdir(parents=True, exist_ok=True)
        (self.path / ".gitignore").write_text(GITIGNORE_CONTENT, encoding="utf-8")
        (self.path / "README.md").write_text(README_CONTENT, encoding="utf-8")
        logger.info(f"✅ Onboarding environment ready at {self.path}")

    def exists(self) -> bool:
        return self.path.is_dir()

    def cleanup(self) -> None:
        if self.path.is_dir():
            shutil.rmtree(self.path)
            logger.info(f"🗑️  Removed onboarding environment {self.path}")
