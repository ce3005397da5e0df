"""
Handles the processing of a single file identifier, from metadata lookup to the
file written on disk.
"""

import logging
from enum import Enum

from rich.markup import escape

from gdrive_mirror.api.transport import RemoteTransport
from gdrive_mirror.exceptions import JobError
from gdrive_mirror.storage.materializer import LocalMaterializer

from .path_resolver import PathResolver

log = logging.getLogger(__name__)


class JobStage(Enum):
    """Lifecycle of one identifier's pipeline."""

    ADMITTED = "admitted"
    METADATA_FETCHED = "metadata-fetched"
    PATH_RESOLVED = "path-resolved"
    DOWNLOADED = "downloaded"
    WRITTEN = "written"
    FAILED = "failed"


class FileProcessor:
    """
    Runs the four dependent stages for one file: fetch metadata, resolve the
    folder path, open the download and write it to disk.

    Stages run strictly in order and the first failure ends the job. Failures
    are logged here and never raised, so a broken identifier cannot disturb
    any other job.
    """

    def __init__(
        self,
        transport: RemoteTransport,
        resolver: PathResolver,
        materializer: LocalMaterializer,
    ):
        self.transport = transport
        self.resolver = resolver
        self.materializer = materializer

    async def process(self, file_id: str) -> JobStage:
        """
        Mirrors a single file and returns its terminal stage, either
        `JobStage.WRITTEN` or `JobStage.FAILED`.
        """
        stage = JobStage.ADMITTED
        try:
            item = await self.transport.fetch_metadata(file_id)
            stage = JobStage.METADATA_FETCHED

            folder = await self.resolver.resolve(item)
            stage = JobStage.PATH_RESOLVED

            async with self.transport.open_content(file_id) as chunks:
                stage = JobStage.DOWNLOADED
                destination = await self.materializer.materialize(
                    folder.as_posix(), item.name, chunks, file_id=file_id
                )
            stage = JobStage.WRITTEN

            log.debug(f"Mirrored '{escape(file_id)}' to [dim]{escape(str(destination))}[/dim]")
            return stage

        except JobError as e:
            log.error(f"[red]✗ Unable to {e.stage} '{escape(file_id)}':[/red] {escape(str(e))}")
        except Exception as e:
            log.error(
                f"[red]✗ An unexpected error occurred for '{escape(file_id)}':[/red] {escape(str(e))}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )

        log.debug(f"Job '{escape(file_id)}' failed after stage '{stage.value}'.")
        return JobStage.FAILED
