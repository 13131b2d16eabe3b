"""Admission control for the job-triggering actions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.backend import PipelineError
from core.schemas import JobKind

if TYPE_CHECKING:
    from core.backend import PipelineBackend
    from core.store import ConsoleStore

logger = logging.getLogger(__name__)

START_MESSAGES: dict[JobKind, str] = {
    JobKind.INGEST: "Starting ingest...",
    JobKind.SYNC: "Starting sync...",
}


class JobGate:
    """Allow at most one job-trigger request in flight.

    Both actions share the same condition: the locator resolves to a name
    and no request is in flight. Calls made while the gate is closed are
    dropped, not queued.
    """

    def __init__(self, store: ConsoleStore, backend: PipelineBackend) -> None:
        self._store = store
        self._backend = backend

    @property
    def can_ingest(self) -> bool:
        return self._store.gate_open

    @property
    def can_sync(self) -> bool:
        return self._store.gate_open

    async def trigger_ingest(self) -> bool:
        """Request an initial ingest of the current repository."""
        return await self.trigger(JobKind.INGEST)

    async def trigger_sync(self) -> bool:
        """Request a sync of the current repository to its latest revision."""
        return await self.trigger(JobKind.SYNC)

    async def trigger(self, kind: JobKind) -> bool:
        """Issue one ``kind`` request unless the gate is closed.

        The progress display is reset to a start message before the request
        is sent. The in-flight flag is cleared once the request settles,
        whether or not the server accepted it.

        Parameters
        ----------
        kind : JobKind
            The job to start.

        Returns
        -------
        bool
            ``False`` if the call was dropped or the request failed.

        """
        store = self._store
        if not store.gate_open:
            logger.debug(
                "Dropping %s request: gate closed (name=%r, submitting=%s)",
                kind,
                store.repo_name,
                store.submitting,
            )
            return False

        logger.info("Triggering %s for %s", kind, store.repo_name)
        try:
            store.set_submitting(True)
            store.restart_progress(START_MESSAGES[kind])
            await self._backend.trigger_job(kind, store.locator, store.credentials)
        except PipelineError as exc:
            logger.warning("%s request for %s failed: %s", kind.capitalize(), store.repo_name, exc)
            return False
        finally:
            store.set_submitting(False)
        return True
