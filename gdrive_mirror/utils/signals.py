"""
Advisory handling of SIGINT and SIGTERM.

Interrupting the process does not stop it: in-flight jobs keep running and
intake keeps reading. The only way to end a session is to close the input
stream, so a signal just tells the operator so.
"""

import asyncio
import logging
import signal
from contextlib import suppress
from typing import Any, Dict, Iterable, Optional

log = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)
ADVISORY_MESSAGE = (
    "The application doesn't terminate with Ctrl+C, use Ctrl+D instead"
)


class AdvisorySignalListener:
    """
    A dedicated task that logs every interrupt it is notified of.

    Usage:
        async with AdvisorySignalListener():
            await manager.run(lines)
    """

    def __init__(self, signals: Iterable[int] = SHUTDOWN_SIGNALS):
        self.signals = tuple(signals)
        self.received = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self._previous_handlers: Dict[int, Any] = {}

    async def __aenter__(self) -> "AdvisorySignalListener":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    def start(self) -> None:
        """Installs the handlers and starts the listener task."""
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        for sig in self.signals:
            try:
                self._loop.add_signal_handler(sig, self._queue.put_nowait, sig)
            except NotImplementedError:
                # No loop signal support on Windows.
                self._previous_handlers[sig] = signal.signal(sig, self._on_signal)
        self._task = asyncio.create_task(self._listen(), name="signal-listener")
        log.debug("Advisory signal listener started.")

    async def stop(self) -> None:
        """Restores default signal handling and stops the listener task."""
        for sig in self.signals:
            if sig in self._previous_handlers:
                signal.signal(sig, self._previous_handlers.pop(sig))
            elif self._loop is not None:
                self._loop.remove_signal_handler(sig)
        if self._task and not self._task.done():
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
        log.debug("Advisory signal listener stopped.")

    def _on_signal(self, signum: int, frame: Any) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, signum)

    async def _listen(self) -> None:
        while True:
            signum = await self._queue.get()
            self.received += 1
            log.debug(f"Received {signal.Signals(signum).name}.")
            log.warning(f"[yellow]{ADVISORY_MESSAGE}[/yellow]")
