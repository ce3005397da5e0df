"""
The contract the mirror core depends on to talk to remote storage.
"""

from typing import AsyncContextManager, AsyncIterator, Protocol

from gdrive_mirror.models.item import RemoteItem


class RemoteTransport(Protocol):
    """
    An authenticated, concurrency-safe view of the remote file hierarchy.

    Implementations raise `MetadataFetchError` and `ContentDownloadError`;
    the core never sees transport-specific exceptions.
    """

    async def fetch_metadata(self, file_id: str) -> RemoteItem:
        """Returns the display name and parent ids of an item."""
        ...

    def open_content(self, file_id: str) -> AsyncContextManager[AsyncIterator[bytes]]:
        """
        Starts the download of a file's content.

        Entering the context issues the request and fails fast if the server
        refuses it; the yielded iterator streams the body in chunks and the
        connection is released on exit.
        """
        ...
