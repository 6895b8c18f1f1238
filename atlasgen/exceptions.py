"""Atlas Generator exceptions."""


class AtlasGenError(Exception):
    """Base exception for atlasgen."""


class StagingError(AtlasGenError):
    """Source image missing or unreadable; the job cannot be staged."""


class WorkerLaunchError(AtlasGenError):
    """The worker executable could not be started."""


class QueueError(AtlasGenError):
    """Invalid queue operation (double enqueue, waiting on an unknown job)."""


class JobNotFoundError(AtlasGenError):
    """No job with the given id."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class PipelineNotFoundError(AtlasGenError):
    """No pipeline configuration available or the requested one is missing."""


class JobTimeoutError(AtlasGenError):
    """A configured bound on output waiting, validation or import was exceeded."""
