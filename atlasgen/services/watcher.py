"""Output watcher: waits for the worker's result file to appear and settle.

The worker writes its output incrementally and never signals completion,
so a file is considered finished once its size is the same on two
consecutive polls. A worker that stalls mid-write for longer than one
poll interval will be judged complete too early; tune ``poll_interval``
accordingly.
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger("atlasgen.watcher")

DEFAULT_POLL_INTERVAL = 0.5


class OutputWatcher:
    """Polls the filesystem for an expected output artifact."""

    def __init__(self, poll_interval: float = DEFAULT_POLL_INTERVAL):
        self.poll_interval = poll_interval

    async def wait_for_stable_file(
        self,
        path: Union[str, Path],
        timeout: Optional[float] = None,
    ) -> bool:
        """Wait until ``path`` exists and its size stops changing.

        Args:
            path: File the worker is expected to write
            timeout: Seconds before giving up, None waits forever

        Returns:
            True once the file is stable, False if the timeout elapsed first
        """
        path = str(path)
        deadline = None if timeout is None else time.monotonic() + timeout

        while not os.path.isfile(path):
            if self._expired(deadline):
                logger.warning("Timed out waiting for %s to appear", path)
                return False
            await self._sleep()

        logger.debug("Output %s appeared, waiting for size to settle", path)

        last_size = -1
        while not self._expired(deadline):
            try:
                current_size = os.path.getsize(path)
            except OSError:
                # Replaced or removed between polls, start over
                current_size = -1
            if current_size == last_size and current_size >= 0:
                logger.info("Output %s is stable at %d bytes", path, current_size)
                return True
            last_size = current_size
            await self._sleep()

        logger.warning("Timed out waiting for %s to stabilise", path)
        return False

    async def _sleep(self):
        await asyncio.sleep(self.poll_interval)

    @staticmethod
    def _expired(deadline: Optional[float]) -> bool:
        return deadline is not None and time.monotonic() >= deadline
