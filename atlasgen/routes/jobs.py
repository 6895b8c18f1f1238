"""Job endpoints: request conversions and check their progress."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..exceptions import StagingError
from ..models import ConvertRequest, JobListResponse, JobResponse
from ..services import JobManager
from .deps import get_job_manager

logger = logging.getLogger("atlasgen.routes.jobs")

router = APIRouter()


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_job(
    request: ConvertRequest,
    manager: JobManager = Depends(get_job_manager),
):
    """Request a conversion of an image from the source directory.

    The job is queued behind any jobs already waiting; poll
    GET /jobs/{job_id} for its ticket and state.
    """
    try:
        job = manager.create_job(request.source_name, request.request_kind)
    except StagingError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    await manager.submit(job)
    logger.info("Accepted job %s with ticket %d", job.job_id, job.ticket)
    return JobResponse.from_job(job)


@router.get("/jobs", response_model=JobListResponse)
async def list_jobs(
    limit: int = 50,
    manager: JobManager = Depends(get_job_manager),
):
    """List jobs of this session, newest first."""
    limit = min(max(limit, 1), 100)
    jobs = manager.list_jobs(limit=limit)
    return JobListResponse(
        jobs=[JobResponse.from_job(job) for job in jobs],
        total=len(manager.jobs),
    )


@router.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    manager: JobManager = Depends(get_job_manager),
):
    """Current state, ticket and elapsed time of a job."""
    job = manager.get_job(job_id)
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {job_id} not found"
        )
    return JobResponse.from_job(job)
