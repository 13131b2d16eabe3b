"""Core module for the gevity console.

Provides the ``ConsoleSession`` that reconciles operator input, job triggers
and the server's status stream into a single ``ConsoleView``.
"""

from core.repo_name import parse_repo_name
from core.session import ConsoleSession
from core.store import ConsoleView

__all__ = ["ConsoleSession", "ConsoleView", "parse_repo_name"]
