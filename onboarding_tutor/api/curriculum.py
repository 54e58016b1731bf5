"""
API routes for curriculum generation, task progress and export.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from onboarding_tutor.agents.models import CamelModel, Curriculum, TaskStatus
from onboarding_tutor.api.dependencies import get_learning_service
from onboarding_tutor.services.curriculum_exporter import ExportFormat
from onboarding_tutor.services.learning_service import (
    CurriculumExport,
    LearningService,
    StatisticsView,
    TaskProgressUpdate,
)
from onboarding_tutor.utils.ndjson import NDJSON_MEDIA_TYPE, ndjson_lines

router = APIRouter()
logger = logging.getLogger(__name__)


class GenerateCurriculumRequest(CamelModel):
    force_regenerate: bool = False


class UpdateTaskStatusRequest(CamelModel):
    status: TaskStatus


class OpenTaskFileRequest(CamelModel):
    path: str


@router.post("/generate")
async def generate_curriculum(
    request: GenerateCurriculumRequest | None = None,
    service: LearningService = Depends(get_learning_service),
):
    """
    Stream curriculum generation progress as newline-delimited JSON.
    The stream ends with a `completed` or `error` event.
    """
    force = request.force_regenerate if request else False
    logger.info(f"📚 Curriculum generation requested (force_regenerate={force})")
    return StreamingResponse(
        ndjson_lines(service.generate_curriculum(force)), media_type=NDJSON_MEDIA_TYPE
    )


@router.get("", response_model=Curriculum, response_model_by_alias=True)
def get_curriculum(service: LearningService = Depends(get_learning_service)):
    curriculum = service.get_curriculum()
    if curriculum is None:
        raise HTTPException(status_code=404, detail="Curriculum not found")
    return curriculum


@router.post(
    "/tasks/{task_id}/status",
    response_model=TaskProgressUpdate,
    response_model_by_alias=True,
)
def update_task_status(
    task_id: str,
    request: UpdateTaskStatusRequest,
    service: LearningService = Depends(get_learning_service),
):
    try:
        update = service.update_task_progress(task_id, request.status)
        if update is None:
            raise HTTPException(status_code=404, detail="Task not found")
        return update
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to update task: {str(e)}")


@router.get("/statistics", response_model=StatisticsView, response_model_by_alias=True)
def get_statistics(service: LearningService = Depends(get_learning_service)):
    view = service.get_statistics()
    if view is None:
        raise HTTPException(status_code=404, detail="Curriculum not found")
    return view


@router.get("/export", response_model=CurriculumExport, response_model_by_alias=True)
def export_curriculum(
    format: ExportFormat = Query("markdown"),
    include_statistics: bool = Query(True, alias="includeStatistics"),
    service: LearningService = Depends(get_learning_service),
):
    try:
        exported = service.export_curriculum(format, include_statistics)
        if exported is None:
            raise HTTPException(status_code=404, detail="Curriculum not found")
        return exported
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error exporting curriculum: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to export curriculum: {str(e)}")


@router.post("/tasks/{task_id}/open")
def open_task_file(
    task_id: str,
    request: OpenTaskFileRequest,
    service: LearningService = Depends(get_learning_service),
):
    """Open one of a task's target files in the editor."""
    opened = service.open_task_file(request.path)
    if opened is None:
        raise HTTPException(status_code=400, detail=f"Cannot open file: {request.path}")
    logger.info(f"📂 Opened {request.path} for task {task_id}")
    return {"success": True, "path": str(opened)}
