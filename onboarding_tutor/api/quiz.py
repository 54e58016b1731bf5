"""
API routes for the skill-check quiz.
Quiz payloads sent to clients never include correct answers or explanations.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import Field

from onboarding_tutor.agents.models import AnswerCheck, CamelModel, PublicQuiz, QuizGenerationProgress
from onboarding_tutor.api.dependencies import get_learning_service
from onboarding_tutor.services.learning_service import (
    AvailableTechnologies,
    LearningService,
    QuizCompletion,
)
from onboarding_tutor.utils.ndjson import NDJSON_MEDIA_TYPE, ndjson_lines

router = APIRouter()
logger = logging.getLogger(__name__)


class GenerateQuizRequest(CamelModel):
    technologies: list[str] = Field(default_factory=list)
    use_project_context: bool = False


class SubmitAnswerRequest(CamelModel):
    quiz_id: str
    question_id: str
    selected_choice_id: str
    time_spent_seconds: int = Field(default=0, ge=0)


@router.get(
    "/technologies", response_model=AvailableTechnologies, response_model_by_alias=True
)
async def get_available_technologies(service: LearningService = Depends(get_learning_service)):
    return await service.get_available_technologies()


@router.get("/tech-stack")
async def detect_tech_stack(service: LearningService = Depends(get_learning_service)):
    return {"technologies": await service.detect_tech_stack()}


@router.post("/generate")
async def generate_quiz(
    request: GenerateQuizRequest | None = None,
    service: LearningService = Depends(get_learning_service),
):
    """Stream quiz generation progress as newline-delimited JSON."""
    request = request or GenerateQuizRequest()
    events = service.generate_quiz(request.technologies, request.use_project_context)
    return StreamingResponse(
        ndjson_lines(events, QuizGenerationProgress.to_public), media_type=NDJSON_MEDIA_TYPE
    )


@router.get("", response_model=PublicQuiz, response_model_by_alias=True)
def get_quiz(service: LearningService = Depends(get_learning_service)):
    quiz = service.get_public_quiz()
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@router.post("/answers", response_model=AnswerCheck, response_model_by_alias=True)
def submit_answer(
    request: SubmitAnswerRequest,
    service: LearningService = Depends(get_learning_service),
):
    try:
        check = service.submit_quiz_answer(
            request.quiz_id,
            request.question_id,
            request.selected_choice_id,
            request.time_spent_seconds,
        )
        if check is None:
            raise HTTPException(status_code=404, detail="Quiz or question not found")
        return check
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error submitting answer: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to submit answer: {str(e)}")


@router.post("/complete", response_model=QuizCompletion, response_model_by_alias=True)
def complete_quiz(service: LearningService = Depends(get_learning_service)):
    try:
        completion = service.complete_quiz()
        if completion is None:
            raise HTTPException(status_code=400, detail="No quiz or no answers recorded")
        return completion
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error completing quiz: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to complete quiz: {str(e)}")
