from pydantic_settings import BaseSettings
from typing import Literal, Optional, Union
from functools import lru_cache
from pathlib import Path
from pydantic import field_validator

# Get the project root directory (one level up from onboarding_tutor/)
PROJECT_ROOT = Path(__file__).parent.parent

# Export these for app-wide use
__all__ = ["Settings", "settings", "get_settings"]

class Settings(BaseSettings):
    # App Settings
    app_name: str = "Codebase Onboarding Tutor"
    debug: Union[bool, str] = False

    @field_validator('debug', mode='before')
    @classmethod
    def parse_debug(cls, v):
        """Parse debug from various formats"""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            v_lower = v.lower().strip()
            if v_lower in ('true', '1', 'yes', 'on'):
                return True
            if v_lower in ('false', '0', 'no', 'off'):
                return False
            # Anything else (like 'WARN') is treated as a development setting
            return True
        return bool(v)

    # Server Settings
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS Settings - Allowed frontend URLs (editor webview, local UI)
    cors_origins: Union[str, list[str]] = ["*"]

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list"""
        if isinstance(v, str):
            # Handle comma-separated string from .env
            if v.strip() == "*":
                return ["*"]
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    # Environment (development or production)
    environment: str = "development"

    # Workspace - the project the user is onboarding onto
    workspace_root: Optional[Path] = None  # Maps to WORKSPACE_ROOT
    state_dir_name: str = ".onboarding"

    # Language used for prompts, progress messages and exports
    content_language: Literal["ja", "en"] = "ja"

    # LLM API Keys - Groq (OpenAI-compatible streaming endpoint)
    groq_api_key: Optional[str] = None
    groq_model: str = "llama-3.3-70b-versatile"
    groq_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    llm_timeout: float = 120.0  # Timeout in seconds
    llm_temperature: float = 0.7
    llm_max_tokens: int = 8000

    # Project analysis bounds (keep the prompt summary bounded)
    analyzer_max_depth: int = 4
    analyzer_max_files_per_dir: int = 50
    analyzer_max_total_files: int = 500
    summary_max_children: int = 15

    # Quiz
    quiz_question_count: int = 5
    quiz_max_technologies: int = 5

    # Logging
    log_level: str = "INFO"

    class Config:
        # Look for .env in project root
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields in .env that aren't defined

@lru_cache()
def get_settings() -> Settings:
    """
    Create and cache a single Settings instance (Singleton pattern).
    Returns the same instance on subsequent calls.
    """
    return Settings()

# Create a global settings instance for convenience
settings = get_settings()
