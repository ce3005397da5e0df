"""
The main orchestrator: reads identifiers, admits them into a bounded pool of
concurrent jobs and waits for every admitted job to finish.
"""

import asyncio
import logging
import time
from typing import Optional, Set

from gdrive_mirror.api.transport import RemoteTransport
from gdrive_mirror.models.config import MirrorConfig
from gdrive_mirror.models.stats import MirrorStats
from gdrive_mirror.storage.materializer import LocalMaterializer
from gdrive_mirror.utils.input import LineSource, iter_lines

from .file_processor import FileProcessor, JobStage
from .path_resolver import PathResolver

log = logging.getLogger(__name__)


class PendingJobs:
    """
    A counted barrier over dynamically spawned jobs.

    `add` is called on admission and `done` when a job reaches its terminal
    state; `wait` returns once the count is back to zero.
    """

    def __init__(self) -> None:
        self._count = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def count(self) -> int:
        return self._count

    def add(self) -> None:
        self._count += 1
        self._idle.clear()

    def done(self) -> None:
        if self._count <= 0:
            raise RuntimeError("PendingJobs.done() called more times than add()")
        self._count -= 1
        if self._count == 0:
            self._idle.set()

    async def wait(self) -> None:
        await self._idle.wait()


class MirrorManager:
    """Orchestrates the entire mirror session."""

    def __init__(
        self,
        config: MirrorConfig,
        transport: RemoteTransport,
        materializer: Optional[LocalMaterializer] = None,
    ):
        self.config = config
        self.transport = transport
        self.stats = MirrorStats()
        self.file_processor = FileProcessor(
            transport,
            PathResolver(transport),
            materializer or LocalMaterializer(config.output_dir),
        )
        self.semaphore = asyncio.Semaphore(config.max_workers)
        self.pending = PendingJobs()
        self._tasks: Set[asyncio.Task] = set()

    async def run(self, lines: LineSource) -> None:
        """
        Mirrors every identifier read from `lines`.

        Intake blocks while `max_workers` jobs are running, so the source is
        consumed no faster than jobs are admitted. Blank lines are skipped.
        Returns once the source is exhausted and every admitted job has
        finished, whatever the individual outcomes.
        """
        start_time = time.monotonic()
        try:
            async for line in iter_lines(lines):
                file_id = line.strip()
                if not file_id:
                    continue
                await self.semaphore.acquire()
                self._admit(file_id)
        finally:
            await self.pending.wait()

        duration = time.monotonic() - start_time
        log.debug(
            f"Session finished in {duration:.2f}s: {self.stats.admitted} admitted, "
            f"{self.stats.succeeded} written, {self.stats.failed} failed, "
            f"peak concurrency {self.stats.peak_in_flight}."
        )

    def _admit(self, file_id: str) -> None:
        """Spawns the job for an identifier that already holds a permit."""
        self.pending.add()
        self.stats.job_started()
        task = asyncio.create_task(self._run_job(file_id), name=f"mirror:{file_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_job(self, file_id: str) -> None:
        success = False
        try:
            success = await self.file_processor.process(file_id) is JobStage.WRITTEN
        finally:
            self.stats.job_finished(success)
            self.semaphore.release()
            self.pending.done()
