"""Advisory check whether the server already knows the current repository."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from core.backend import PipelineError

if TYPE_CHECKING:
    from core.backend import PipelineBackend
    from core.store import ConsoleStore

logger = logging.getLogger(__name__)


class ExistenceProbe:
    """Fire one existence check per transition to a new repository name.

    The probe only ever confirms existence. Failures leave the flag as it is
    and are never shown to the operator.
    """

    def __init__(self, store: ConsoleStore, backend: PipelineBackend) -> None:
        self._store = store
        self._backend = backend
        self._last_name: str | None = None
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def pending(self) -> set[asyncio.Task[bool]]:
        """Probe calls that have not settled yet."""
        return set(self._tasks)

    def observe(self) -> asyncio.Task[bool] | None:
        """Schedule a probe if the store's name changed since the last call.

        Must be called from within a running event loop.

        Returns
        -------
        asyncio.Task[bool] | None
            The scheduled probe, or ``None`` when nothing had to be checked.

        """
        name = self._store.repo_name
        if name == self._last_name:
            return None
        self._last_name = name
        if name is None:
            return None

        task = asyncio.get_running_loop().create_task(self.check(name))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def check(self, repo_name: str) -> bool:
        """Ask the server about ``repo_name`` and record a positive answer.

        Parameters
        ----------
        repo_name : str
            The name that was current when the probe was issued.

        Returns
        -------
        bool
            ``True`` if the existence flag was set for the current repository.

        """
        try:
            reply = await self._backend.probe_exists(repo_name)
        except PipelineError as exc:
            logger.debug("Existence probe for %r failed: %s", repo_name, exc)
            return False

        if not reply.exists:
            logger.debug("Repository %r is not known to the server (status=%r)", repo_name, reply.status)
            return False
        return self._store.confirm_exists(repo_name)
