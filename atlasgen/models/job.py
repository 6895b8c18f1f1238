"""Conversion job models."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class JobState(str, Enum):
    """Lifecycle state of a conversion job."""
    CREATED = "created"
    ENQUEUED = "enqueued"
    WAITING = "waiting"
    EXECUTING = "executing"
    AWAITING_OUTPUT = "awaiting_output"
    VALIDATING = "validating"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT})

# States in which the job holds the worker
PROCESSING_STATES = frozenset({JobState.EXECUTING, JobState.AWAITING_OUTPUT, JobState.VALIDATING})


class RequestKind(str, Enum):
    """Conversion mode passed to the worker; selects the output container."""
    GENERATE_OBJ = "generate-obj"
    GENERATE_FBX = "generate-fbx"

    @property
    def output_extension(self) -> str:
        return ".obj" if self is RequestKind.GENERATE_OBJ else ".fbx"


class ImportedModel(BaseModel):
    """Handle returned by the importer once a model is usable."""
    path: Path
    size_bytes: int
    textures: List[Path] = Field(default_factory=list)


class ConversionJob(BaseModel):
    """One image-to-3D conversion request."""
    job_id: str
    source_name: str
    request_kind: RequestKind = RequestKind.GENERATE_OBJ
    ticket: int = 0  # 0 = not enqueued, 1 = eligible, >1 = waiting
    state: JobState = JobState.CREATED

    # File references
    source_image_path: Optional[Path] = None
    temp_image_path: Optional[Path] = None
    expected_output_path: Optional[Path] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Outcome
    validation_attempts: int = 0
    error_message: Optional[str] = None
    imported_model: Optional[ImportedModel] = None

    @property
    def is_live(self) -> bool:
        return self.state not in TERMINAL_STATES

    @property
    def is_processing(self) -> bool:
        return self.state in PROCESSING_STATES

    @property
    def elapsed_seconds(self) -> Optional[float]:
        """Seconds since the job started executing, for display only."""
        if self.started_at is None:
            return None
        end = self.completed_at or datetime.utcnow()
        return (end - self.started_at).total_seconds()

    @classmethod
    def create(
        cls,
        source_name: str,
        request_kind: RequestKind,
        generated_dir: Path,
    ) -> "ConversionJob":
        """Build a job whose output lands in ``generated_dir/<job_id>/``."""
        job_id = new_job_id(source_name)
        return cls(
            job_id=job_id,
            source_name=source_name,
            request_kind=request_kind,
            expected_output_path=output_path_for(Path(generated_dir), job_id, request_kind),
        )


def new_job_id(source_name: str) -> str:
    """``<stem>-<HH-MM-SS>-<hex>``; the suffix keeps same-second jobs apart."""
    stem = Path(source_name).stem.replace(" ", "") or "job"
    return f"{stem}-{datetime.now().strftime('%H-%M-%S')}-{uuid4().hex[:6]}"


def output_path_for(generated_dir: Path, job_id: str, request_kind: RequestKind) -> Path:
    return generated_dir / job_id / f"{job_id}{RequestKind(request_kind).output_extension}"
