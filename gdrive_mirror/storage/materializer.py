"""
Writes downloaded content to the local mirror of the remote folder tree.
"""

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterable, Union

import aiofiles

from gdrive_mirror.exceptions import DirectoryCreateError, FileWriteError

log = logging.getLogger(__name__)

CURRENT_DIR = "."


class LocalMaterializer:
    """
    Creates destination folders and copies content streams into files.

    Writes go straight to the final path. An interrupted copy leaves the
    partial file on disk. Remote names are used verbatim, so a destination
    that resolves outside the root (an absolute or `..` folder name) is
    refused.
    """

    def __init__(self, root: Union[str, Path] = CURRENT_DIR):
        self.root = Path(root)

    async def materialize(
        self,
        dir_path: str,
        file_name: str,
        chunks: AsyncIterable[bytes],
        file_id: str = "",
    ) -> Path:
        """
        Ensures `dir_path` exists below the root and writes `chunks` to
        `dir_path/file_name`, truncating any existing file.

        Returns:
            The path of the written file.

        Raises:
            DirectoryCreateError: If the folder chain cannot be created or would
                leave the root.
            FileWriteError: If the file cannot be opened or written.
        """
        directory = self.root / (dir_path or CURRENT_DIR)
        destination = directory / file_name
        if not await asyncio.to_thread(self._is_inside_root, destination):
            raise DirectoryCreateError(
                file_id, f"'{destination}' is outside the output folder '{self.root}'"
            )

        try:
            await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(
                file_id, f"unable to create '{directory}': {e}"
            ) from e

        bytes_written = 0
        try:
            async with aiofiles.open(destination, "wb") as f:
                async for chunk in chunks:
                    await f.write(chunk)
                    bytes_written += len(chunk)
        except OSError as e:
            raise FileWriteError(
                file_id, f"unable to write '{destination}': {e}"
            ) from e

        log.debug(f"Wrote {bytes_written} bytes to '{destination}'.")
        return destination

    def _is_inside_root(self, destination: Path) -> bool:
        root = self.root.resolve()
        target = destination.resolve()
        return target != root and target.is_relative_to(root)
