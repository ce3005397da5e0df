"""Drive API client tests against a local aiohttp server."""

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from gdrive_mirror.api.client import DriveAPIClient
from gdrive_mirror.exceptions import (
    ContentDownloadError,
    CredentialError,
    MetadataFetchError,
)

pytestmark = pytest.mark.asyncio

FILES = {
    "fileA": {"name": "fileA", "content": b"hello"},
    "fileB": {"name": "fileB", "parents": ["folder2"], "content": b"x" * 300_000},
    "folder2": {"name": "folder2", "parents": ["folder1"]},
}


async def _get_file(request: web.Request) -> web.Response:
    if request.headers.get("Authorization") != "Bearer test-token":
        return web.json_response({"error": {"code": 401}}, status=401)

    file_id = request.match_info["file_id"]
    entry = FILES.get(file_id)
    if entry is None:
        return web.json_response(
            {"error": {"code": 404, "message": f"File not found: {file_id}."}},
            status=404,
        )

    request.app["requests"].append((file_id, dict(request.query)))
    if request.query.get("alt") == "media":
        return web.Response(body=entry.get("content", b""))
    return web.json_response(
        {key: value for key, value in entry.items() if key in ("name", "parents")}
    )


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app["requests"] = []
    app.router.add_get("/drive/v3/files/{file_id}", _get_file)
    test_server = TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


async def _token() -> str:
    return "test-token"


def _client(server, token_provider=_token) -> DriveAPIClient:
    return DriveAPIClient(
        token_provider,
        max_workers=2,
        request_timeout=5,
        base_url=str(server.make_url("/drive/v3/")),
    )


async def test_fetch_metadata_returns_name_and_parents(server) -> None:
    async with _client(server) as client:
        item = await client.fetch_metadata("fileB")

    assert item.id == "fileB"
    assert item.name == "fileB"
    assert item.parents == ("folder2",)
    file_id, query = server.app["requests"][0]
    assert query["fields"] == "name,parents"


async def test_fetch_metadata_of_root_item_has_no_parents(server) -> None:
    async with _client(server) as client:
        item = await client.fetch_metadata("fileA")

    assert item.parents == ()
    assert item.first_parent is None


async def test_missing_file_raises_metadata_fetch_error(server) -> None:
    async with _client(server) as client:
        with pytest.raises(MetadataFetchError) as excinfo:
            await client.fetch_metadata("nope")

    assert excinfo.value.file_id == "nope"
    assert "404" in str(excinfo.value)


async def test_rejected_token_raises_metadata_fetch_error(server) -> None:
    async def wrong_token() -> str:
        return "expired"

    async with _client(server, wrong_token) as client:
        with pytest.raises(MetadataFetchError):
            await client.fetch_metadata("fileA")


async def test_token_refresh_failure_is_scoped_to_the_request(server) -> None:
    async def failing_token() -> str:
        raise CredentialError("Unable to refresh oauth token")

    async with _client(server, failing_token) as client:
        with pytest.raises(MetadataFetchError):
            await client.fetch_metadata("fileA")
        with pytest.raises(ContentDownloadError):
            async with client.open_content("fileA"):
                pass


async def test_open_content_streams_the_whole_body(server) -> None:
    async with _client(server) as client:
        async with client.open_content("fileB") as chunks:
            body = b"".join([chunk async for chunk in chunks])

    assert body == FILES["fileB"]["content"]
    file_id, query = server.app["requests"][0]
    assert query["alt"] == "media"


async def test_open_content_fails_on_enter_for_refused_download(server) -> None:
    async with _client(server) as client:
        with pytest.raises(ContentDownloadError) as excinfo:
            async with client.open_content("nope"):
                pytest.fail("context must not be entered")

    assert excinfo.value.file_id == "nope"


async def test_close_is_idempotent(server) -> None:
    client = _client(server)
    await client.fetch_metadata("fileA")
    await client.close()
    await client.close()


async def test_undecodable_identifier_fails_only_its_own_request(server) -> None:
    bad_id = b"\xff\xfe".decode("utf-8", errors="surrogateescape")

    async with _client(server) as client:
        with pytest.raises(MetadataFetchError):
            await client.fetch_metadata(bad_id)
        with pytest.raises(ContentDownloadError):
            async with client.open_content(bad_id):
                pass
        item = await client.fetch_metadata("fileA")

    assert item.name == "fileA"
    assert [file_id for file_id, _ in server.app["requests"]] == ["fileA"]
