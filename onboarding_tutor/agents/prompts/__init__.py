"""
Prompt templates for curriculum and quiz generation.
Every prompt asks the model for a ```json fenced block.
"""

from onboarding_tutor.agents.prompts.curriculum import (
    CURRICULUM_SYSTEM_PROMPT,
    build_curriculum_prompt,
)
from onboarding_tutor.agents.prompts.quiz import QUIZ_SYSTEM_PROMPT, build_quiz_prompt

__all__ = [
    "CURRICULUM_SYSTEM_PROMPT",
    "QUIZ_SYSTEM_PROMPT",
    "build_curriculum_prompt",
    "build_quiz_prompt",
]
