"""Derive the canonical repository name from an operator-entered locator."""

from __future__ import annotations

import re
from urllib.parse import unquote, urlparse

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

# ``git@host:owner/repo.git``
_SCP_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+:(?P<path>.+)$")


def parse_repo_name(locator: str) -> str | None:
    """Return the canonical short name for ``locator``.

    Full URLs (``https://host/owner/repo[.git]``, ``ssh://…``), scp-style remotes
    (``git@host:owner/repo.git``) and bare names (``owner/repo`` or ``repo``) are
    accepted. The canonical name is the trailing repository segment without any
    ``.git`` suffix.

    Parameters
    ----------
    locator : str
        The raw text entered by the operator.

    Returns
    -------
    str | None
        The repository name, or ``None`` if the locator cannot be resolved yet.

    """
    text = unquote(locator.strip())
    if not text:
        return None

    if "://" in text:
        parsed = urlparse(text)
        if not parsed.netloc:
            return None
        parts = [p for p in parsed.path.split("/") if p]
        # A URL must name at least owner/repo.
        if len(parts) < 2:  # noqa: PLR2004
            return None
    elif match := _SCP_PATTERN.match(text):
        parts = [p for p in match.group("path").split("/") if p]
    else:
        parts = [p for p in text.split("/") if p]

    if not parts:
        return None

    name = parts[-1].removesuffix(".git")
    if name in {"", ".", ".."} or not _NAME_PATTERN.match(name):
        return None
    return name
