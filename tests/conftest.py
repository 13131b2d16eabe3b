"""Fixtures for tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest

from api.client import PipelineClient
from api.config import Settings
from core.backend import PipelineError
from core.schemas import Credentials, JobKind, ProbeReply

Handler = Callable[[httpx.Request], httpx.Response]


def format_sse_event(event: dict[str, Any]) -> str:
    """Frame ``event`` as one SSE ``data:`` message, the way the server sends it."""
    return f"data: {json.dumps(event)}\n\n"


class FakeBackend:
    """In-memory ``PipelineBackend`` whose calls can be held open by the test."""

    def __init__(self) -> None:
        self.probe_calls: list[str] = []
        self.trigger_calls: list[tuple[JobKind, str, Credentials]] = []
        self.probe_replies: dict[str, ProbeReply | Exception] = {}
        self.probe_gates: dict[str, asyncio.Event] = {}
        self.trigger_gate: asyncio.Event | None = None
        self.trigger_error: Exception | None = None
        self.payloads: list[Any] = []
        self.stream_error: Exception | None = None
        self.subscriptions = 0

    async def probe_exists(self, repo_name: str) -> ProbeReply:
        self.probe_calls.append(repo_name)
        if (gate := self.probe_gates.get(repo_name)) is not None:
            await gate.wait()
        reply = self.probe_replies.get(repo_name, ProbeReply(status="error"))
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def trigger_job(self, kind: JobKind, locator: str, credentials: Credentials) -> Any:
        self.trigger_calls.append((kind, locator, credentials))
        if self.trigger_gate is not None:
            await self.trigger_gate.wait()
        if self.trigger_error is not None:
            raise self.trigger_error
        return {"status": "accepted"}

    async def subscribe_status(self) -> AsyncIterator[Any]:
        self.subscriptions += 1
        for payload in self.payloads:
            yield payload
        if self.stream_error is not None:
            raise self.stream_error


@pytest.fixture
def backend() -> FakeBackend:
    """Provide a fresh in-memory backend."""
    return FakeBackend()


@pytest.fixture
def pipeline_error() -> PipelineError:
    """Provide a generic backend failure."""
    return PipelineError("connection refused")


@pytest.fixture
def settings() -> Settings:
    """Provide settings that do not depend on the environment."""
    return Settings(_env_file=None, server_url="http://pipeline.test")


@pytest.fixture
def make_client(settings: Settings) -> Callable[[Handler], PipelineClient]:
    """Provide a factory for ``PipelineClient`` objects served by ``handler``."""

    def _make_client(handler: Handler) -> PipelineClient:
        http = httpx.AsyncClient(base_url=settings.server_url, transport=httpx.MockTransport(handler))
        return PipelineClient(http, settings)

    return _make_client
