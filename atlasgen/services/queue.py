"""Ticket queue that serialises access to the worker executable.

Every live job is registered here explicitly. A job's ticket is its
1-based position in line: ticket 1 may drive the worker, everyone else
waits on a shared condition until releases move them up to 1.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from ..exceptions import QueueError
from ..models import ConversionJob, JobState

logger = logging.getLogger("atlasgen.queue")


class QueueCoordinator:
    """Owned registry of live jobs with FIFO ticket assignment."""

    def __init__(self):
        self._jobs: Dict[str, ConversionJob] = {}
        self._turn = asyncio.Condition()

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job: ConversionJob) -> bool:
        return job.job_id in self._jobs

    def get(self, job_id: str) -> Optional[ConversionJob]:
        return self._jobs.get(job_id)

    def max_live_ticket(self) -> int:
        """Highest ticket held by a registered job, 0 when the queue is empty."""
        return max((job.ticket for job in self._jobs.values()), default=0)

    def snapshot(self) -> List[ConversionJob]:
        """Registered jobs ordered by ticket."""
        return sorted(self._jobs.values(), key=lambda j: j.ticket)

    async def enqueue(self, job: ConversionJob) -> int:
        """Register a job and give it the next ticket.

        Args:
            job: Job to enqueue, must not already be registered

        Returns:
            The assigned ticket
        """
        async with self._turn:
            if job.job_id in self._jobs:
                raise QueueError(f"Job {job.job_id} is already enqueued (ticket {job.ticket})")
            job.ticket = self.max_live_ticket() + 1
            job.state = JobState.ENQUEUED
            self._jobs[job.job_id] = job

        logger.info("Enqueued job %s with ticket %d", job.job_id, job.ticket)
        return job.ticket

    async def await_turn(self, job: ConversionJob):
        """Suspend until the job holds ticket 1. Never times out."""
        async with self._turn:
            if job.job_id not in self._jobs:
                raise QueueError(f"Job {job.job_id} is not enqueued")
            job.state = JobState.WAITING
            if job.ticket != 1:
                logger.info("Job %s waiting behind %d job(s)", job.job_id, job.ticket - 1)
            await self._turn.wait_for(lambda: job.ticket == 1)

        logger.info("Job %s is next in line", job.job_id)

    async def release(self, job: ConversionJob):
        """Remove a finished job and move everyone behind it up by one."""
        async with self._turn:
            if self._jobs.pop(job.job_id, None) is None:
                logger.warning("Release of unknown job %s ignored", job.job_id)
                return

            released = job.ticket
            for other in self._jobs.values():
                if other.ticket > released:
                    other.ticket = max(other.ticket - 1, 0)
            job.ticket = 0
            self._turn.notify_all()

        logger.info("Released ticket %d held by job %s (%d job(s) left)", released, job.job_id, len(self._jobs))
