"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from atlasgen.config import Settings
from atlasgen.services import JobExecutor, QueueCoordinator
from tests.fixtures import FakeWorker, write_source_image


@pytest.fixture
def test_settings(tmp_path):
    """Settings rooted in a temporary directory with fast polling."""
    settings = Settings(
        worker_path=tmp_path / "bin" / "worker",
        source_dir=tmp_path / "images" / "original-images",
        temp_dir=tmp_path / "images" / "temp-images",
        generated_dir=tmp_path / "GeneratedModels",
        pipelines_dir=tmp_path / "pipelines",
        pipeline_state_file=tmp_path / "state" / "active_pipeline.json",
        poll_interval=0.01,
        refresh_interval=0.01,
        validation_retry_interval=0.01,
        import_retry_interval=0.01,
    )
    settings.ensure_dirs()
    (settings.pipelines_dir / "default.json").write_text(json.dumps({"steps": []}))
    return settings


@pytest.fixture
def source_image(test_settings) -> Path:
    return write_source_image(test_settings.source_dir, "crate.png")


@pytest.fixture
def queue():
    return QueueCoordinator()


@pytest.fixture
def fake_worker():
    return FakeWorker()


@pytest.fixture
def executor(test_settings, queue, fake_worker):
    return JobExecutor(test_settings, queue, worker=fake_worker)
