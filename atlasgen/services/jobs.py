"""Job registry: creates conversion jobs and schedules their execution."""

import asyncio
import logging
from typing import Dict, List, Optional

from ..config import Settings
from ..exceptions import JobNotFoundError
from ..models import ConversionJob, RequestKind
from .executor import JobExecutor
from .queue import QueueCoordinator
from .staging import resolve_source_image

logger = logging.getLogger("atlasgen.jobs")


class JobManager:
    """Keeps every job of the session and runs each one as an asyncio task."""

    def __init__(self, settings: Settings, queue: QueueCoordinator, executor: JobExecutor):
        self.settings = settings
        self.queue = queue
        self.executor = executor
        self.jobs: Dict[str, ConversionJob] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        logger.info("JobManager initialized")

    @classmethod
    def from_settings(cls, settings: Settings) -> "JobManager":
        queue = QueueCoordinator()
        return cls(settings, queue, JobExecutor(settings, queue))

    def create_job(self, source_name: str, request_kind: RequestKind = RequestKind.GENERATE_OBJ) -> ConversionJob:
        """Create a job for an image in the source directory.

        Raises:
            StagingError: If the source image does not exist
        """
        job = ConversionJob.create(source_name, request_kind, self.settings.generated_dir)
        job.source_image_path = resolve_source_image(self.settings.source_dir, source_name)
        self.jobs[job.job_id] = job
        logger.info("Created job %s for %s", job.job_id, job.source_image_path)
        return job

    async def submit(self, job: ConversionJob) -> ConversionJob:
        """Enqueue the job and start its executor task.

        Returns:
            The job, already holding its ticket
        """
        self.jobs[job.job_id] = job
        await self.queue.enqueue(job)
        task = asyncio.create_task(self.executor.run(job), name=f"job-{job.job_id}")
        self._tasks[job.job_id] = task
        return job

    def get_job(self, job_id: str) -> Optional[ConversionJob]:
        return self.jobs.get(job_id)

    def list_jobs(self, limit: int = 100) -> List[ConversionJob]:
        """Jobs sorted by created_at, newest first."""
        jobs = sorted(self.jobs.values(), key=lambda j: j.created_at, reverse=True)
        return jobs[:limit]

    async def wait(self, job_id: str) -> ConversionJob:
        """Wait for a submitted job to reach a terminal state.

        Cancelling the caller (or timing it out) does not cancel the job.
        """
        task = self._tasks.get(job_id)
        if task is None:
            raise JobNotFoundError(job_id)
        return await asyncio.shield(task)

    async def shutdown(self):
        """Cancel running job tasks; their tickets are released on the way out."""
        pending = [task for task in self._tasks.values() if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info("Cancelled %d unfinished job(s)", len(pending))
