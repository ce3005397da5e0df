"""Shared fixtures: an in-memory Drive that implements the transport contract."""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional

import pytest

from gdrive_mirror.exceptions import ContentDownloadError, MetadataFetchError
from gdrive_mirror.models.item import RemoteItem


class FakeDrive:
    """
    Serves metadata and content from dictionaries and records every call.

    `delay` makes each call yield to the event loop so that jobs overlap.
    """

    def __init__(
        self,
        items: Iterable[RemoteItem] = (),
        contents: Optional[Dict[str, bytes]] = None,
        fail_metadata: Iterable[str] = (),
        fail_content: Iterable[str] = (),
        delay: float = 0.0,
    ):
        self.items = {item.id: item for item in items}
        self.contents = contents or {}
        self.fail_metadata = set(fail_metadata)
        self.fail_content = set(fail_content)
        self.delay = delay
        self.metadata_calls: List[str] = []
        self.content_calls: List[str] = []

    def add(self, file_id: str, name: str, *parents: str, content: bytes = b"") -> None:
        self.items[file_id] = RemoteItem(file_id, name, tuple(parents))
        self.contents[file_id] = content

    async def fetch_metadata(self, file_id: str) -> RemoteItem:
        self.metadata_calls.append(file_id)
        await asyncio.sleep(self.delay)
        if file_id in self.fail_metadata or file_id not in self.items:
            raise MetadataFetchError(file_id, "404 File not found")
        return self.items[file_id]

    @asynccontextmanager
    async def open_content(self, file_id: str):
        self.content_calls.append(file_id)
        await asyncio.sleep(self.delay)
        if file_id in self.fail_content:
            raise ContentDownloadError(file_id, "403 fileNotDownloadable")
        data = self.contents.get(file_id, b"")

        async def chunks():
            for i in range(0, len(data), 4):
                await asyncio.sleep(0)
                yield data[i : i + 4]

        yield chunks()


@pytest.fixture
def drive() -> FakeDrive:
    return FakeDrive()


@pytest.fixture
def slow_drive() -> FakeDrive:
    return FakeDrive(delay=0.01)
