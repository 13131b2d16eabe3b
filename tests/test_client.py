"""Tests for the HTTP client and the SSE framing."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import httpx
import pytest

from api.client import PipelineRequestError
from api.progress import decode_event_data, iter_sse_events
from conftest import format_sse_event
from core.schemas import Credentials, JobKind

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from api.client import PipelineClient


async def _lines(*lines: str) -> AsyncIterator[str]:
    for line in lines:
        yield line


async def _collect(lines: AsyncIterator[str]) -> list[tuple[str, str]]:
    return [event async for event in iter_sse_events(lines)]


class TestSSEFraming:
    """Tests for ``iter_sse_events`` and ``decode_event_data``."""

    def test_single_events(self) -> None:
        """Blank lines terminate events."""
        events = asyncio.run(_collect(_lines('data: {"step": 1}', "", 'data: {"step": 2}', "")))
        assert events == [("message", '{"step": 1}'), ("message", '{"step": 2}')]

    def test_multiline_data_and_event_names(self) -> None:
        """Data lines are joined, ``event:`` names the event and resets afterwards."""
        events = asyncio.run(
            _collect(_lines("event: status", "data: first", "data: second", "", "data: x", "")),
        )
        assert events == [("status", "first\nsecond"), ("message", "x")]

    def test_comments_and_unknown_fields_skipped(self) -> None:
        """Keep-alive comments and ids produce no events."""
        events = asyncio.run(_collect(_lines(": keep-alive", "", "id: 7", "retry: 100", "data: y\r", "")))
        assert events == [("message", "y")]

    def test_trailing_event_without_blank_line(self) -> None:
        """A final event is flushed when the stream ends."""
        assert asyncio.run(_collect(_lines("data: z"))) == [("message", "z")]

    def test_round_trip(self) -> None:
        """Formatted events decode to the same payload."""
        payload = {"message": "cloning", "progress": 12.5}
        lines = format_sse_event(payload).split("\n")
        events = asyncio.run(_collect(_lines(*lines)))
        assert [decode_event_data(data) for _, data in events] == [payload]

    def test_decode_invalid_json(self) -> None:
        """Invalid JSON decodes to ``None``."""
        assert decode_event_data("{not json") is None


class TestPipelineClient:
    """Tests for ``PipelineClient`` against a mocked server."""

    @pytest.mark.asyncio
    async def test_probe_exists(self, make_client: Callable[..., PipelineClient]) -> None:
        """The probe posts the repo name and decodes the reply."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "success"})

        client = make_client(handler)
        reply = await client.probe_exists("widgets")

        assert reply.exists
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/fetch-repo"
        assert json.loads(seen[0].content) == {"repo_name": "widgets"}
        await client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(404, json={"detail": "not found"}),
            httpx.Response(500, text="boom"),
            httpx.Response(200, text="<html>"),
            httpx.Response(200, json={"unexpected": True}),
        ],
    )
    async def test_probe_errors(self, make_client: Callable[..., PipelineClient], response: httpx.Response) -> None:
        """Bad replies are reported as ``PipelineRequestError``."""
        client = make_client(lambda _request: response)
        with pytest.raises(PipelineRequestError):
            await client.probe_exists("widgets")
        await client.aclose()

    @pytest.mark.asyncio
    async def test_probe_transport_error(self, make_client: Callable[..., PipelineClient]) -> None:
        """Connection failures are wrapped."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        with pytest.raises(PipelineRequestError, match="refused"):
            await client.probe_exists("widgets")
        await client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("kind", "path"), [(JobKind.INGEST, "/ingest"), (JobKind.SYNC, "/process")])
    async def test_trigger_job(self, make_client: Callable[..., PipelineClient], kind: JobKind, path: str) -> None:
        """Each job kind posts the locator and credentials to its endpoint."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "accepted"})

        client = make_client(handler)
        ack = await client.trigger_job(kind, "https://example.com/acme/widgets", Credentials(username="bob", pat="p"))

        assert ack == {"status": "accepted"}
        assert seen[0].url.path == path
        assert json.loads(seen[0].content) == {
            "repo_url": "https://example.com/acme/widgets",
            "username": "bob",
            "pat": "p",
        }
        await client.aclose()

    @pytest.mark.asyncio
    async def test_trigger_job_empty_ack(self, make_client: Callable[..., PipelineClient]) -> None:
        """An empty acknowledgement is fine."""
        client = make_client(lambda _request: httpx.Response(204))
        assert await client.trigger_job(JobKind.INGEST, "widgets", Credentials()) is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_trigger_job_rejected(self, make_client: Callable[..., PipelineClient]) -> None:
        """A server error is raised as ``PipelineRequestError``."""
        client = make_client(lambda _request: httpx.Response(500, text="boom"))
        with pytest.raises(PipelineRequestError, match="500"):
            await client.trigger_job(JobKind.SYNC, "widgets", Credentials())
        await client.aclose()

    @pytest.mark.asyncio
    async def test_subscribe_status(self, make_client: Callable[..., PipelineClient]) -> None:
        """Stream events are decoded in order; undecodable ones become ``None``."""
        body = (
            format_sse_event({"message": "cloning"})
            + ": ping\n\n"
            + "data: {broken\n\n"
            + format_sse_event({"step": 1, "total_steps": 3})
        )

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/events"
            return httpx.Response(200, text=body, headers={"content-type": "text/event-stream"})

        client = make_client(handler)
        payloads = [payload async for payload in client.subscribe_status()]

        assert payloads == [{"message": "cloning"}, None, {"step": 1, "total_steps": 3}]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_subscribe_status_error(self, make_client: Callable[..., PipelineClient]) -> None:
        """A stream that cannot be opened raises ``PipelineRequestError``."""
        client = make_client(lambda _request: httpx.Response(503))
        with pytest.raises(PipelineRequestError):
            async for _payload in client.subscribe_status():
                pass
        await client.aclose()
