"""Job executor: drives one conversion job from queue to imported model.

    enqueued -> waiting -> executing -> awaiting_output -> validating -> completed
                                 \\-> failed (staging / launch errors)
    awaiting_output / validating -> timed_out (only when bounds are configured)

Validation failures are not fatal: the file is re-checked at a fixed
interval until it passes, so slow writers are tolerated. Without
``max_validation_attempts`` / ``output_timeout`` a worker that leaves a
corrupt file behind keeps the job (and the queue behind it) waiting.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional

from ..config import Settings
from ..exceptions import JobTimeoutError, PipelineNotFoundError, StagingError, WorkerLaunchError
from ..models import ConversionJob, JobState, output_path_for
from .importer import LibraryImporter, ModelImporter
from .pipelines import PipelineSelector
from .queue import QueueCoordinator
from .staging import resolve_source_image, stage_input
from .validator import validate_output
from .watcher import OutputWatcher
from .worker import WorkerProcess, build_worker_args, remove_with_sidecar

logger = logging.getLogger("atlasgen.executor")


class JobExecutor:
    """Runs conversion jobs one at a time through the shared worker."""

    def __init__(
        self,
        settings: Settings,
        queue: QueueCoordinator,
        worker: Optional[WorkerProcess] = None,
        watcher: Optional[OutputWatcher] = None,
        importer: Optional[ModelImporter] = None,
        pipelines: Optional[PipelineSelector] = None,
    ):
        self.settings = settings
        self.queue = queue
        self.worker = worker or WorkerProcess()
        self.watcher = watcher or OutputWatcher(settings.poll_interval)
        self.importer = importer or LibraryImporter(settings.generated_dir)
        self.pipelines = pipelines or PipelineSelector(settings.pipelines_dir, settings.pipeline_state_file)

    async def run(self, job: ConversionJob) -> ConversionJob:
        """Queue the job (if needed), wait for its turn and execute it.

        The ticket is released on every exit path, including cancellation,
        so the jobs behind it move up by exactly one.

        Returns:
            The job in a terminal state
        """
        if job not in self.queue:
            await self.queue.enqueue(job)

        try:
            await self.queue.await_turn(job)
            await self._execute(job)
        except (StagingError, WorkerLaunchError, PipelineNotFoundError) as e:
            logger.error("Job %s failed: %s", job.job_id, e)
            self._finish(job, JobState.FAILED, str(e))
        except JobTimeoutError as e:
            logger.error("Job %s timed out: %s", job.job_id, e)
            self._finish(job, JobState.TIMED_OUT, str(e))
        except asyncio.CancelledError:
            logger.warning("Job %s cancelled in state %s", job.job_id, job.state.value)
            self._finish(job, JobState.FAILED, "Cancelled")
            raise
        except Exception as e:
            logger.error("Unexpected error in job %s: %s", job.job_id, e, exc_info=True)
            self._finish(job, JobState.FAILED, f"Unexpected error: {e}")
        finally:
            if job.temp_image_path is not None:
                remove_with_sidecar(job.temp_image_path)
            if job in self.queue:
                await self.queue.release(job)

        return job

    async def _execute(self, job: ConversionJob):
        job.state = JobState.EXECUTING
        job.started_at = datetime.utcnow()
        logger.info("Executing job %s (%s)", job.job_id, job.request_kind.value)

        pipeline = self.pipelines.active_path()
        if job.source_image_path is None:
            job.source_image_path = resolve_source_image(self.settings.source_dir, job.source_name)
        job.temp_image_path = stage_input(job.source_image_path, self.settings.temp_dir, job.job_id)

        if job.expected_output_path is None:
            job.expected_output_path = output_path_for(self.settings.generated_dir, job.job_id, job.request_kind)
        output_path = job.expected_output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if not job.temp_image_path.is_file():
            raise StagingError(f"Staged input disappeared before launch: {job.temp_image_path}")

        args = build_worker_args(job.temp_image_path, pipeline, job.request_kind, output_path)
        await self.worker.run(self.settings.worker_path, args, cleanup=[job.temp_image_path])

        job.state = JobState.AWAITING_OUTPUT
        await self._await_output(job)

        job.state = JobState.VALIDATING
        await self._validate(job)

        job.imported_model = await self._import(job)
        self._finish(job, JobState.COMPLETED)
        logger.info("Job %s completed in %.1fs", job.job_id, job.elapsed_seconds or 0.0)

    async def _await_output(self, job: ConversionJob):
        """Wait for a stable output file, refreshing the importer between waits."""
        deadline = _deadline(self.settings.output_timeout)

        while True:
            timeout = _min_timeout(self.settings.stable_wait_timeout, deadline)
            if await self.watcher.wait_for_stable_file(job.expected_output_path, timeout=timeout):
                return
            if _expired(deadline):
                raise JobTimeoutError(
                    f"Output {job.expected_output_path} not stable after {self.settings.output_timeout}s"
                )
            self.importer.refresh()
            await asyncio.sleep(self.settings.refresh_interval)

    async def _validate(self, job: ConversionJob):
        limit = self.settings.max_validation_attempts

        while True:
            job.validation_attempts += 1
            result = validate_output(job.expected_output_path, job.request_kind)
            if result:
                return
            if limit is not None and job.validation_attempts >= limit:
                raise JobTimeoutError(f"Output still invalid after {limit} attempt(s): {result.reason}")
            await asyncio.sleep(self.settings.validation_retry_interval)

    async def _import(self, job: ConversionJob):
        limit = self.settings.max_validation_attempts
        attempts = 0

        while True:
            model = self.importer.import_model(job.expected_output_path)
            if model is not None:
                return model
            attempts += 1
            if limit is not None and attempts >= limit:
                raise JobTimeoutError(f"Model {job.expected_output_path} not importable after {limit} attempt(s)")
            self.importer.refresh()
            await asyncio.sleep(self.settings.import_retry_interval)

    @staticmethod
    def _finish(job: ConversionJob, state: JobState, error: Optional[str] = None):
        job.state = state
        job.completed_at = datetime.utcnow()
        job.error_message = error


def _deadline(timeout: Optional[float]) -> Optional[float]:
    return None if timeout is None else time.monotonic() + timeout


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.monotonic() >= deadline


def _min_timeout(per_wait: Optional[float], deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return per_wait
    remaining = max(deadline - time.monotonic(), 0.0)
    return remaining if per_wait is None else min(per_wait, remaining)
