"""
Codebase Onboarding Tutor
Application package initialization
"""

from onboarding_tutor.config import settings, get_settings, Settings

__all__ = ["settings", "get_settings", "Settings"]
