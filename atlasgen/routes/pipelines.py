"""Pipeline endpoints: list pipeline configurations and pick the active one."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..exceptions import PipelineNotFoundError
from ..models import PipelineListResponse, SelectPipelineRequest
from ..services import JobManager
from .deps import get_job_manager

logger = logging.getLogger("atlasgen.routes.pipelines")

router = APIRouter()


@router.get("/pipelines", response_model=PipelineListResponse)
async def list_pipelines(manager: JobManager = Depends(get_job_manager)):
    selector = manager.executor.pipelines
    return PipelineListResponse(pipelines=selector.list(), active=selector.active_name)


@router.put("/pipelines/active", response_model=PipelineListResponse)
async def select_pipeline(
    request: SelectPipelineRequest,
    manager: JobManager = Depends(get_job_manager),
):
    """Set the pipeline used by jobs that have not started executing yet."""
    selector = manager.executor.pipelines
    try:
        selector.select(request.name)
    except PipelineNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return PipelineListResponse(pipelines=selector.list(), active=selector.active_name)
