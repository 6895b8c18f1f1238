"""Data models for the conversion queue."""

from .api import (
    ConvertRequest,
    JobListResponse,
    JobResponse,
    PipelineListResponse,
    QueueEntry,
    QueueResponse,
    SelectPipelineRequest,
)
from .job import (
    PROCESSING_STATES,
    TERMINAL_STATES,
    ConversionJob,
    ImportedModel,
    JobState,
    RequestKind,
    new_job_id,
    output_path_for,
)

__all__ = [
    "ConversionJob",
    "ImportedModel",
    "JobState",
    "RequestKind",
    "PROCESSING_STATES",
    "TERMINAL_STATES",
    "new_job_id",
    "output_path_for",
    "ConvertRequest",
    "JobResponse",
    "JobListResponse",
    "QueueEntry",
    "QueueResponse",
    "PipelineListResponse",
    "SelectPipelineRequest",
]
