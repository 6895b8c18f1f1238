"""Launches the external image-to-3D worker and waits for it to exit."""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..exceptions import WorkerLaunchError
from ..models import RequestKind

logger = logging.getLogger("atlasgen.worker")

# Sidecar metadata written next to staged images by asset tooling
SIDECAR_SUFFIX = ".meta"

PathLike = Union[str, Path]


@dataclass
class WorkerResult:
    """Captured output of one worker run."""
    stdout: str
    stderr: str
    exit_code: Optional[int]

    @property
    def has_errors(self) -> bool:
        return bool(self.stderr.strip())


def build_worker_args(
    input_image: PathLike,
    pipeline_config: PathLike,
    request_kind: RequestKind,
    output_path: PathLike,
) -> List[str]:
    """Positional arguments understood by the worker executable."""
    return [str(input_image), str(pipeline_config), RequestKind(request_kind).value, str(output_path)]


class WorkerProcess:
    """Runs the worker executable as a subprocess."""

    async def run(
        self,
        executable: PathLike,
        args: List[str],
        cleanup: Iterable[PathLike] = (),
    ) -> WorkerResult:
        """Start the worker, drain both output streams and await its exit.

        Args:
            executable: Path to the worker executable
            args: Arguments, see build_worker_args
            cleanup: Scratch files deleted (with their sidecars) once the
                process exits, whatever its exit code

        Returns:
            WorkerResult with decoded stdout/stderr and the exit code

        Raises:
            WorkerLaunchError: If the executable cannot be started
        """
        logger.info("Launching worker %s %s", executable, " ".join(args))

        try:
            process = await asyncio.create_subprocess_exec(
                str(executable),
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise WorkerLaunchError(f"Failed to launch worker {executable}: {e}") from e

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            # The worker must be gone before the ticket is handed on
            logger.warning("Worker run cancelled, killing pid %s", process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            raise
        finally:
            for path in cleanup:
                remove_with_sidecar(path)

        result = WorkerResult(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=process.returncode,
        )

        if result.has_errors:
            # Not fatal: the worker reports warnings on stderr on runs that still succeed
            logger.error("Worker reported errors (exit code %s): %s", result.exit_code, result.stderr.strip())
        else:
            logger.info("Worker finished with exit code %s", result.exit_code)
            if result.stdout.strip():
                logger.debug("Worker output: %s", result.stdout.strip())

        return result


def remove_with_sidecar(path: PathLike):
    """Delete a scratch file and its .meta sidecar if they exist."""
    for candidate in (str(path), str(path) + SIDECAR_SUFFIX):
        try:
            os.remove(candidate)
            logger.debug("Deleted %s", candidate)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to delete %s: %s", candidate, e)
