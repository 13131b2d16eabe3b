"""Interface of the ingestion server as seen by the console core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from core.schemas import Credentials, JobKind, ProbeReply


class PipelineError(Exception):
    """Raised by a backend when a request to the server fails."""


class PipelineBackend(Protocol):
    """Operations the console needs from the ingestion server.

    Failed requests must raise ``PipelineError``; the console never sees
    transport-specific exceptions.
    """

    async def probe_exists(self, repo_name: str) -> ProbeReply:
        """Ask whether the server already knows ``repo_name``."""
        ...

    async def trigger_job(self, kind: JobKind, locator: str, credentials: Credentials) -> Any:  # noqa: ANN401
        """Start ``kind`` for ``locator``; returns once the server accepted or rejected it."""
        ...

    def subscribe_status(self) -> AsyncIterator[Any]:
        """Yield the decoded payload of every status event, in delivery order."""
        ...
