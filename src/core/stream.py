"""Consumer of the server's status event stream."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from core.backend import PipelineError
from core.schemas import StatusRecord

if TYPE_CHECKING:
    from core.backend import PipelineBackend
    from core.store import ConsoleStore

logger = logging.getLogger(__name__)


class StatusStream:
    """Fold the pushed status records into the store, in delivery order.

    The subscription is opened once per session and outlives any change of
    repository. Reconnecting is left to the backend.
    """

    def __init__(self, store: ConsoleStore, backend: PipelineBackend) -> None:
        self._store = store
        self._backend = backend
        self._task: asyncio.Task[int] | None = None

    def start(self) -> asyncio.Task[int]:
        """Open the subscription; later calls return the existing task."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self.consume())
        return self._task

    def handle(self, payload: object) -> bool:
        """Merge one decoded payload.

        Returns
        -------
        bool
            ``True`` if the progress state changed.

        """
        record = StatusRecord.from_payload(payload)
        if record is None:
            return False
        return self._store.apply_record(record)

    async def consume(self) -> int:
        """Read the stream until the server closes it.

        Returns
        -------
        int
            Number of records that changed the progress state.

        """
        applied = 0
        try:
            async for payload in self._backend.subscribe_status():
                if self.handle(payload):
                    applied += 1
        except PipelineError as exc:
            logger.warning("Status stream failed: %s", exc)
        else:
            logger.info("Status stream closed by the server")
        return applied
