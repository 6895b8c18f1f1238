"""Request/response models for the conversion API."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .job import ConversionJob, JobState, RequestKind


class ConvertRequest(BaseModel):
    """Request body for POST /jobs."""
    source_name: str = Field(..., min_length=1, description="Image name under the source directory")
    request_kind: RequestKind = RequestKind.GENERATE_OBJ


class JobResponse(BaseModel):
    """Status of a conversion job."""
    job_id: str
    source_name: str
    request_kind: RequestKind
    state: JobState
    ticket: int
    processing: bool
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    elapsed_seconds: Optional[float] = None
    validation_attempts: int = 0
    output_path: Optional[str] = None
    error_message: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "job_id": "crate-14-03-22-a1b2c3",
                "source_name": "crate",
                "request_kind": "generate-obj",
                "state": "waiting",
                "ticket": 2,
                "processing": False,
                "created_at": "2026-10-19T14:03:22Z",
            }
        }

    @classmethod
    def from_job(cls, job: ConversionJob) -> "JobResponse":
        return cls(
            job_id=job.job_id,
            source_name=job.source_name,
            request_kind=job.request_kind,
            state=job.state,
            ticket=job.ticket,
            processing=job.is_processing,
            created_at=job.created_at,
            started_at=job.started_at,
            completed_at=job.completed_at,
            elapsed_seconds=job.elapsed_seconds,
            validation_attempts=job.validation_attempts,
            output_path=str(job.expected_output_path) if job.expected_output_path else None,
            error_message=job.error_message,
        )


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int


class QueueEntry(BaseModel):
    """One row of the processes queue view."""
    ticket: int
    job_id: str
    state: JobState


class QueueResponse(BaseModel):
    entries: List[QueueEntry]
    length: int


class PipelineListResponse(BaseModel):
    pipelines: List[str]
    active: Optional[str] = None


class SelectPipelineRequest(BaseModel):
    name: str = Field(..., min_length=1)
