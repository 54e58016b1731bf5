"""
API routes for the learner profile and the onboarding state directory.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from onboarding_tutor.agents.models import UserProfile
from onboarding_tutor.api.dependencies import get_learning_service
from onboarding_tutor.services.learning_service import LearningService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=UserProfile, response_model_by_alias=True)
def get_profile(service: LearningService = Depends(get_learning_service)):
    profile = service.get_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("")
def save_profile(profile: UserProfile, service: LearningService = Depends(get_learning_service)):
    try:
        service.save_profile(profile)
        return {"success": True}
    except Exception as e:
        logger.error(f"Error saving profile: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to save profile: {str(e)}")


@router.post("/init")
def init_environment(service: LearningService = Depends(get_learning_service)):
    try:
        service.init_environment()
        return {"success": True, "stateDir": str(service.config.state_dir)}
    except Exception as e:
        logger.error(f"Error initializing environment: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to initialize environment: {str(e)}")
