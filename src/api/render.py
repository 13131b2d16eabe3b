"""Renderers for the console view: an HTML panel and a plain-text form."""

from __future__ import annotations

from typing import TYPE_CHECKING

from api.config import get_settings
from api.shared import templates

if TYPE_CHECKING:
    from core import ConsoleView

BAR_WIDTH = 30


def _bar(percent: float, width: int = BAR_WIDTH) -> str:
    filled = round(width * percent / 100)
    return "[" + "#" * filled + "-" * (width - filled) + f"] {percent:5.1f}%"


def render_html(view: ConsoleView, title: str | None = None) -> str:
    """Render the console panel as HTML.

    Parameters
    ----------
    view : ConsoleView
        The view to render.
    title : str | None
        Header shown while no repository is selected; defaults to ``Settings.app_title``.

    Returns
    -------
    str
        The HTML fragment.

    """
    template = templates.get_template("console.html")
    return template.render(view=view, progress=view.progress, title=title or get_settings().app_title)


def render_text(view: ConsoleView, title: str | None = None) -> str:
    """Render the console view for a terminal."""
    lines = [view.repo_name or title or get_settings().app_title]
    if view.submitting:
        lines.append("(submitting...)")
    elif view.sync_offered:
        lines.append("(known to the server, sync available)")

    progress = view.progress
    if progress is not None:
        if progress.steps is not None:
            lines.append(f"{progress.steps.label:<16} {_bar(progress.steps.percent)}")
        if progress.message:
            lines.append(progress.message)
        lines.append(f"{'progress':<16} {_bar(progress.percent)}")
    return "\n".join(lines)
