"""Command line front-end for the gevity console."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Annotated

import typer

from api.client import PipelineClient
from api.config import get_settings
from api.render import render_html, render_text
from core import ConsoleSession, ConsoleView
from core.schemas import JobKind

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Trigger repository ingestion jobs and follow their progress.",
    add_completion=False,
)

UsernameOption = Annotated[str, typer.Option("--username", "-u", help="Username for private repositories")]
PatOption = Annotated[str, typer.Option("--pat", help="Personal access token for private repositories")]
HtmlOption = Annotated[
    Path | None,
    typer.Option("--html", help="Rewrite this file with the rendered panel on every update"),
]


@app.callback()
def main() -> None:
    """Configure logging from the settings."""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class _Printer:
    """Print the text view whenever the progress part of it changes."""

    def __init__(self, html: Path | None) -> None:
        self._html = html
        self._last_progress = None

    def __call__(self, view: ConsoleView) -> None:
        if self._html is not None:
            self._html.write_text(render_html(view), encoding="utf-8")
        if view.progress is not None and view.progress != self._last_progress:
            self._last_progress = view.progress
            typer.echo(render_text(view) + "\n")


async def _run_job(kind: JobKind, locator: str, username: str, pat: str, html: Path | None) -> int:
    backend = PipelineClient.from_settings()
    session = ConsoleSession(backend)
    session.subscribe(_Printer(html))
    stream = session.open_stream()
    try:
        session.set_credentials(username=username, pat=pat)
        session.set_locator(locator)
        if session.store.repo_name is None:
            typer.echo(f"Cannot derive a repository name from {locator!r}", err=True)
            return 2

        await session.wait_for_probes()
        if kind is JobKind.SYNC and not session.view.sync_offered:
            typer.echo(f"{session.store.repo_name} is not known to the server, ingest it first", err=True)
            return 1

        if not await session.gate.trigger(kind):
            typer.echo(f"The {kind} request failed", err=True)
            return 1

        applied = await stream
        logger.info("Stream ended after %d updates", applied)
    finally:
        if not stream.done():
            stream.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await stream
        await backend.aclose()
    return 0


@app.command()
def ingest(locator: str, username: UsernameOption = "", pat: PatOption = "", html: HtmlOption = None) -> None:
    """Ingest LOCATOR and follow the progress until the server closes the stream."""
    raise typer.Exit(asyncio.run(_run_job(JobKind.INGEST, locator, username, pat, html)))


@app.command()
def sync(locator: str, username: UsernameOption = "", pat: PatOption = "", html: HtmlOption = None) -> None:
    """Sync an already ingested LOCATOR to its latest revision."""
    raise typer.Exit(asyncio.run(_run_job(JobKind.SYNC, locator, username, pat, html)))


async def _probe(locator: str) -> tuple[str | None, bool]:
    backend = PipelineClient.from_settings()
    session = ConsoleSession(backend)
    try:
        session.set_locator(locator)
        await session.wait_for_probes()
    finally:
        await backend.aclose()
    return session.store.repo_name, session.store.repo_exists


@app.command()
def probe(locator: str) -> None:
    """Print the canonical name of LOCATOR and whether the server knows it."""
    name, exists = asyncio.run(_probe(locator))
    if name is None:
        typer.echo(f"Cannot derive a repository name from {locator!r}", err=True)
        raise typer.Exit(2)
    typer.echo(f"{name}: {'known' if exists else 'unknown'}")
