"""Conversion services: queue, worker, watcher, executor."""

from .executor import JobExecutor
from .importer import LibraryImporter, ModelImporter
from .jobs import JobManager
from .pipelines import PipelineSelector
from .queue import QueueCoordinator
from .validator import validate_output
from .watcher import OutputWatcher
from .worker import WorkerProcess, WorkerResult, build_worker_args

__all__ = [
    "JobExecutor",
    "JobManager",
    "LibraryImporter",
    "ModelImporter",
    "OutputWatcher",
    "PipelineSelector",
    "QueueCoordinator",
    "WorkerProcess",
    "WorkerResult",
    "build_worker_args",
    "validate_output",
]
