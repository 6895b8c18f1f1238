"""Test fixtures: source images, fake workers and worker scripts."""

from .workers import (
    FBX_CONTENT,
    OBJ_CONTENT,
    FakeWorker,
    read_worker_log,
    write_source_image,
    write_worker_script,
)

__all__ = [
    "FBX_CONTENT",
    "OBJ_CONTENT",
    "FakeWorker",
    "read_worker_log",
    "write_source_image",
    "write_worker_script",
]
