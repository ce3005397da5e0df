"""
Async client for the Google Drive v3 REST API, limited to the two calls the
mirror needs: file metadata and file content.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional
from urllib.parse import quote

import aiohttp

from gdrive_mirror.exceptions import (
    ContentDownloadError,
    CredentialError,
    MetadataFetchError,
)
from gdrive_mirror.models.item import RemoteItem

log = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str]]


class DriveAPIClient:
    """
    Async client for the Drive JSON API (v3).

    A single aiohttp session is shared by every job; its connector is sized from
    the number of workers so that admitted jobs never queue on the pool.
    """

    BASE_URL = "https://www.googleapis.com/drive/v3/"
    METADATA_FIELDS = "name,parents"
    CHUNK_SIZE = 131072  # 128 KB

    def __init__(
        self,
        token_provider: TokenProvider,
        max_workers: int = 10,
        request_timeout: float = 60.0,
        base_url: Optional[str] = None,
    ):
        """
        Initializes the API client.

        Args:
            token_provider: Coroutine function returning a valid bearer token.
            max_workers: The number of concurrent jobs, used to size the connection pool.
            request_timeout: Total timeout in seconds for a metadata request.
            base_url: Overrides the API root, mainly for tests.
        """
        self._token_provider = token_provider
        self.max_workers = max_workers
        self.request_timeout = request_timeout
        self.base_url = base_url or self.BASE_URL
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_workers * 2,
                limit_per_host=self.max_workers * 2,
                ttl_dns_cache=300,
                enable_cleanup_closed=True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers={"Accept-Encoding": "gzip, deflate"},
                timeout=aiohttp.ClientTimeout(
                    total=self.request_timeout, sock_connect=15
                ),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "DriveAPIClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _file_url(self, file_id: str) -> str:
        return f"{self.base_url}files/{quote(file_id, safe='')}"

    async def _auth_headers(self) -> Dict[str, str]:
        token = await self._token_provider()
        return {"Authorization": f"Bearer {token}"}

    async def fetch_metadata(self, file_id: str) -> RemoteItem:
        """Fetches the name and parents of a file or folder."""
        await self._initialize_session()
        try:
            headers = await self._auth_headers()
            async with self._session.get(
                self._file_url(file_id),
                params={"fields": self.METADATA_FIELDS, "supportsAllDrives": "true"},
                headers=headers,
            ) as r:
                r.raise_for_status()
                payload = await r.json()
        except (
            aiohttp.ClientError,
            asyncio.TimeoutError,
            ValueError,
            CredentialError,
        ) as e:
            log.debug(f"Metadata request for '{file_id}' failed: {e!r}")
            raise MetadataFetchError(file_id, str(e) or type(e).__name__) from e

        return RemoteItem.from_api(file_id, payload)

    @asynccontextmanager
    async def open_content(self, file_id: str) -> AsyncIterator[AsyncIterator[bytes]]:
        """Opens a content download and yields an iterator over its chunks."""
        await self._initialize_session()
        response: Optional[aiohttp.ClientResponse] = None
        try:
            headers = await self._auth_headers()
            response = await self._session.get(
                self._file_url(file_id),
                params={"alt": "media", "supportsAllDrives": "true"},
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90),
            )
            response.raise_for_status()
        except (
            aiohttp.ClientError,
            asyncio.TimeoutError,
            ValueError,
            CredentialError,
        ) as e:
            if response is not None:
                response.release()
            log.debug(f"Content request for '{file_id}' failed: {e!r}")
            raise ContentDownloadError(file_id, str(e) or type(e).__name__) from e

        try:
            yield self._iter_body(file_id, response)
        finally:
            response.release()

    async def _iter_body(
        self, file_id: str, response: aiohttp.ClientResponse
    ) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                yield chunk
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ContentDownloadError(file_id, str(e) or type(e).__name__) from e
