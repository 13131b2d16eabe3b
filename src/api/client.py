"""HTTP client for the ingestion server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from api.config import Settings, get_settings
from api.models import FetchRepoRequest, JobRequest
from api.progress import decode_event_data, iter_sse_events
from core.backend import PipelineError
from core.schemas import Credentials, JobKind, ProbeReply

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from pydantic import BaseModel

logger = logging.getLogger(__name__)


class PipelineRequestError(PipelineError):
    """Exception raised when a request to the ingestion server fails."""


class PipelineClient:
    """``PipelineBackend`` implementation on top of ``httpx.AsyncClient``.

    The caller owns the ``httpx.AsyncClient`` and is expected to set its
    ``base_url`` to ``Settings.server_url``.

    Parameters
    ----------
    client : httpx.AsyncClient
        The HTTP client used for every request.
    settings : Settings | None
        Endpoint configuration; defaults to ``get_settings()``.

    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or get_settings()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> PipelineClient:
        """Create a client with its own ``httpx.AsyncClient``; close it with ``aclose``."""
        settings = settings or get_settings()
        client = httpx.AsyncClient(base_url=settings.server_url, timeout=settings.request_timeout)
        return cls(client, settings)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _job_path(self, kind: JobKind) -> str:
        if kind is JobKind.SYNC:
            return self._settings.sync_path
        return self._settings.ingest_path

    async def _post(self, path: str, body: BaseModel) -> httpx.Response:
        try:
            response = await self._client.post(path, json=body.model_dump())
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"POST {path} returned {exc.response.status_code}"
            raise PipelineRequestError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"POST {path} failed: {exc!s}"
            raise PipelineRequestError(msg) from exc
        return response

    async def probe_exists(self, repo_name: str) -> ProbeReply:
        """Ask the server whether it already ingested ``repo_name``.

        Parameters
        ----------
        repo_name : str
            Canonical repository name.

        Returns
        -------
        ProbeReply
            The decoded reply.

        Raises
        ------
        PipelineRequestError
            If the request fails or the reply is not a probe reply.

        """
        path = self._settings.fetch_repo_path
        response = await self._post(path, FetchRepoRequest(repo_name=repo_name))
        try:
            return ProbeReply.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            msg = f"POST {path} returned an unexpected body"
            raise PipelineRequestError(msg) from exc

    async def trigger_job(self, kind: JobKind, locator: str, credentials: Credentials) -> Any:  # noqa: ANN401
        """Start an ingest or a sync on the server.

        Parameters
        ----------
        kind : JobKind
            Which job to start.
        locator : str
            The repository locator as entered by the operator.
        credentials : Credentials
            Forwarded unchanged.

        Returns
        -------
        Any
            The acknowledgement body, ``None`` when the server sent none.

        Raises
        ------
        PipelineRequestError
            If the server could not be reached or rejected the request.

        """
        body = JobRequest(repo_url=locator, username=credentials.username, pat=credentials.pat)
        response = await self._post(self._job_path(kind), body)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def subscribe_status(self) -> AsyncIterator[Any]:
        """Yield the JSON payload of every status event until the server closes the stream.

        Undecodable events are yielded as ``None``.

        Raises
        ------
        PipelineRequestError
            If the stream cannot be opened or breaks off.

        """
        path = self._settings.events_path
        try:
            async with self._client.stream("GET", path, timeout=None) as response:
                response.raise_for_status()
                logger.info("Subscribed to status events at %s", path)
                async for _event, data in iter_sse_events(response.aiter_lines()):
                    yield decode_event_data(data)
        except httpx.HTTPError as exc:
            msg = f"Status stream {path} failed: {exc!s}"
            raise PipelineRequestError(msg) from exc
