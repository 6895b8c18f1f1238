"""Tests for the job model."""

import re
from datetime import datetime, timedelta
from pathlib import Path

from atlasgen.models import ConversionJob, JobResponse, JobState, RequestKind, new_job_id


def test_job_id_format_and_uniqueness():
    ids = {new_job_id("Wooden Crate.png") for _ in range(50)}

    assert len(ids) == 50
    for job_id in ids:
        assert re.fullmatch(r"WoodenCrate-\d{2}-\d{2}-\d{2}-[0-9a-f]{6}", job_id)


def test_create_sets_output_path(tmp_path):
    job = ConversionJob.create("crate", RequestKind.GENERATE_FBX, tmp_path)

    assert job.ticket == 0
    assert job.state == JobState.CREATED
    assert job.expected_output_path == tmp_path / job.job_id / f"{job.job_id}.fbx"


def test_request_kind_extensions():
    assert RequestKind.GENERATE_OBJ.output_extension == ".obj"
    assert RequestKind.GENERATE_FBX.output_extension == ".fbx"
    assert RequestKind("generate-fbx") is RequestKind.GENERATE_FBX


def test_live_and_processing_flags():
    job = ConversionJob(job_id="j", source_name="s")
    assert job.is_live and not job.is_processing

    for state in (JobState.EXECUTING, JobState.AWAITING_OUTPUT, JobState.VALIDATING):
        job.state = state
        assert job.is_processing and job.is_live

    for state in (JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT):
        job.state = state
        assert not job.is_live and not job.is_processing


def test_elapsed_seconds():
    job = ConversionJob(job_id="j", source_name="s")
    assert job.elapsed_seconds is None

    job.started_at = datetime(2026, 1, 1, 12, 0, 0)
    job.completed_at = job.started_at + timedelta(seconds=42)
    assert job.elapsed_seconds == 42


def test_job_response_from_job(tmp_path):
    job = ConversionJob.create("crate", RequestKind.GENERATE_OBJ, tmp_path)
    job.ticket = 3
    job.state = JobState.WAITING

    response = JobResponse.from_job(job)

    assert response.ticket == 3
    assert response.processing is False
    assert Path(response.output_path) == job.expected_output_path
