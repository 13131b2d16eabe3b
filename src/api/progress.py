"""Server-Sent Events framing for the status stream.

``iter_sse_events`` turns the line stream of a ``text/event-stream`` response
into ``(event, data)`` pairs.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)


async def iter_sse_events(lines: AsyncIterable[str]) -> AsyncIterator[tuple[str, str]]:
    """Group SSE lines into events.

    Consecutive ``data:`` lines are joined with newlines, ``event:`` sets the
    event name and lines starting with ``:`` are comments.

    Parameters
    ----------
    lines : AsyncIterable[str]
        The response body split into lines, without line terminators.

    Yields
    ------
    tuple[str, str]
        The event name (``"message"`` unless set) and its data.

    """
    event = "message"
    data_lines: list[str] = []
    async for raw in lines:
        line = raw.rstrip("\r")
        if not line:
            if data_lines:
                yield event, "\n".join(data_lines)
            event = "message"
            data_lines = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        value = value.removeprefix(" ")
        if field == "event":
            event = value
        elif field == "data":
            data_lines.append(value)
    if data_lines:
        yield event, "\n".join(data_lines)


def decode_event_data(data: str) -> Any | None:  # noqa: ANN401
    """Decode the JSON carried by an event, or ``None`` if it is not JSON."""
    try:
        return json.loads(data)
    except ValueError:
        logger.warning("Ignoring undecodable status event: %.200s", data)
        return None
