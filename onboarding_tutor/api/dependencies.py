"""
FastAPI dependencies shared by the learning routers.
"""

import logging

from fastapi import HTTPException

from onboarding_tutor.config import get_settings
from onboarding_tutor.core.workspace import WorkspaceConfig
from onboarding_tutor.services.learning_service import LearningService

logger = logging.getLogger(__name__)


def get_learning_service() -> LearningService:
    """
    Build the learning service for the configured workspace.

    Raises:
        HTTPException: 400 if WORKSPACE_ROOT is not set or is not a directory
    """
    try:
        config = WorkspaceConfig.from_settings(get_settings())
    except ValueError as e:
        logger.warning(f"⚠️  {e}")
        raise HTTPException(status_code=400, detail=str(e))

    if not config.root.is_dir():
        raise HTTPException(
            status_code=400, detail=f"Workspace root is not a directory: {config.root}"
        )
    return LearningService(config)
