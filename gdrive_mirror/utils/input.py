"""
Lazy, line-oriented readers for the identifier stream.
"""

import asyncio
from typing import IO, AsyncIterable, AsyncIterator, Iterable, Union

LineSource = Union[Iterable[str], AsyncIterable[str]]

INPUT_ENCODING = "utf-8"


async def read_lines(stream: IO) -> AsyncIterator[str]:
    """
    Yields lines from a blocking stream without blocking the event loop.

    Each read happens in a worker thread, so the stream is consumed one line at
    a time and only as fast as the caller asks. Iteration ends at end of input.

    Binary streams are decoded line by line with ``surrogateescape``: an
    undecodable byte only spoils the identifier on its own line.
    """
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        if isinstance(line, bytes):
            line = line.decode(INPUT_ENCODING, errors="surrogateescape")
        yield line


async def iter_lines(source: LineSource) -> AsyncIterator[str]:
    """Adapts a sync or async iterable of lines to a single async iterator."""
    if hasattr(source, "__aiter__"):
        async for line in source:
            yield line
    else:
        for line in source:
            yield line
