"""One operator session: wires the store to the probe, the gate and the stream."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from core.gate import JobGate
from core.probe import ExistenceProbe
from core.store import ConsoleStore, ConsoleView
from core.stream import StatusStream

if TYPE_CHECKING:
    from collections.abc import Callable

    from core.backend import PipelineBackend


class ConsoleSession:
    """Entry point used by front-ends.

    Input handlers call ``set_locator`` / ``set_credentials`` on every
    keystroke and ``trigger_ingest`` / ``trigger_sync`` on button presses.
    Everything must run on a single event loop.

    Parameters
    ----------
    backend : PipelineBackend
        The ingestion server.

    """

    def __init__(self, backend: PipelineBackend) -> None:
        self.store = ConsoleStore()
        self.probe = ExistenceProbe(self.store, backend)
        self.gate = JobGate(self.store, backend)
        self.stream = StatusStream(self.store, backend)

    @property
    def view(self) -> ConsoleView:
        return self.store.view

    def subscribe(self, listener: Callable[[ConsoleView], None]) -> Callable[[], None]:
        return self.store.subscribe(listener)

    def open_stream(self) -> asyncio.Task[int]:
        return self.stream.start()

    def set_locator(self, locator: str) -> asyncio.Task[bool] | None:
        """Update the locator and probe the new name if it changed."""
        self.store.set_locator(locator)
        return self.probe.observe()

    def set_credentials(self, username: str | None = None, pat: str | None = None) -> None:
        self.store.set_credentials(username=username, pat=pat)

    async def trigger_ingest(self) -> bool:
        return await self.gate.trigger_ingest()

    async def trigger_sync(self) -> bool:
        return await self.gate.trigger_sync()

    async def wait_for_probes(self) -> None:
        """Wait until every outstanding existence probe settled."""
        if pending := self.probe.pending:
            await asyncio.gather(*pending)
