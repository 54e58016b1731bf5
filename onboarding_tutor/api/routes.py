import logging

from fastapi import APIRouter

from onboarding_tutor.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "workspaceConfigured": settings.workspace_root is not None,
        "message": "🚀 Backend is running smoothly!",
    }
