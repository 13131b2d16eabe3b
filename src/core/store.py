"""Single state store for one console session.

Every mutation goes through ``ConsoleStore`` and is followed by a
recomputation of the derived ``ConsoleView``, which is handed to each
subscribed listener.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from core.progress import ProgressView, project_progress
from core.repo_name import parse_repo_name
from core.schemas import Credentials, ProgressState, StatusRecord

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class ConsoleView(BaseModel):
    """Everything a renderer needs to draw the console.

    Attributes
    ----------
    locator : str
        The text currently in the locator field.
    repo_name : str | None
        Canonical name derived from ``locator``.
    credentials : Credentials
        The credentials currently entered.
    repo_exists : bool
        Whether the server confirmed it knows ``repo_name``.
    submitting : bool
        Whether a job trigger is in flight.
    can_ingest : bool
        Whether the ingest action may be invoked now.
    can_sync : bool
        Whether the sync action may be invoked now.
    sync_offered : bool
        Whether the sync action should be shown at all.
    progress : ProgressView | None
        The progress container, ``None`` until there is something to show.

    """

    model_config = ConfigDict(frozen=True)

    locator: str = ""
    repo_name: str | None = None
    credentials: Credentials = Credentials()
    repo_exists: bool = False
    submitting: bool = False
    can_ingest: bool = False
    can_sync: bool = False
    sync_offered: bool = False
    progress: ProgressView | None = None


class ConsoleStore:
    """Owner of the session state.

    ``repo_name`` is always ``parse_repo_name(locator)``; changing it drops
    both the existence confirmation and the progress of the previous
    repository.
    """

    def __init__(self) -> None:
        self._locator = ""
        self._repo_name: str | None = None
        self._credentials = Credentials()
        self._confirmed_name: str | None = None
        self._submitting = False
        self._progress: ProgressState | None = None
        self._listeners: list[Callable[[ConsoleView], None]] = []

    @property
    def locator(self) -> str:
        return self._locator

    @property
    def repo_name(self) -> str | None:
        return self._repo_name

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def repo_exists(self) -> bool:
        return self._repo_name is not None and self._repo_name == self._confirmed_name

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def progress(self) -> ProgressState | None:
        return self._progress

    @property
    def gate_open(self) -> bool:
        """Whether a job may be triggered: a resolvable name and nothing in flight."""
        return self._repo_name is not None and not self._submitting

    @property
    def view(self) -> ConsoleView:
        """Recompute the derived view from the current state."""
        return ConsoleView(
            locator=self._locator,
            repo_name=self._repo_name,
            credentials=self._credentials,
            repo_exists=self.repo_exists,
            submitting=self._submitting,
            can_ingest=self.gate_open,
            can_sync=self.gate_open,
            sync_offered=self.repo_exists,
            progress=project_progress(self._progress) if self._progress is not None else None,
        )

    def subscribe(self, listener: Callable[[ConsoleView], None]) -> Callable[[], None]:
        """Register ``listener`` for view changes.

        Returns
        -------
        Callable[[], None]
            A function that removes the listener again.

        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        view = self.view
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("Console listener %r failed", listener)

    def set_locator(self, locator: str) -> bool:
        """Replace the locator text.

        Returns
        -------
        bool
            ``True`` if the derived repository name changed.

        """
        self._locator = locator
        name = parse_repo_name(locator)
        changed = name != self._repo_name
        if changed:
            logger.debug("Repository name changed: %r -> %r", self._repo_name, name)
            self._repo_name = name
            self._confirmed_name = None
            self._progress = None
        self._notify()
        return changed

    def set_credentials(self, username: str | None = None, pat: str | None = None) -> None:
        """Update the credentials; ``None`` keeps the current value."""
        self._credentials = self._credentials.model_copy(
            update={k: v for k, v in (("username", username), ("pat", pat)) if v is not None},
        )
        self._notify()

    def confirm_exists(self, repo_name: str) -> bool:
        """Record a positive probe for ``repo_name``.

        Returns
        -------
        bool
            ``False`` if ``repo_name`` is no longer the current name and the answer was dropped.

        """
        if repo_name != self._repo_name:
            logger.debug("Discarding stale probe result for %r (current: %r)", repo_name, self._repo_name)
            return False
        self._confirmed_name = repo_name
        self._notify()
        return True

    def set_submitting(self, submitting: bool) -> None:  # noqa: FBT001
        self._submitting = submitting
        self._notify()

    def restart_progress(self, message: str) -> None:
        """Drop the current progress and show ``message`` alone."""
        self._progress = ProgressState(message=message)
        self._notify()

    def apply_record(self, record: StatusRecord) -> bool:
        """Merge ``record`` into the progress state.

        Returns
        -------
        bool
            ``False`` if the record carried nothing to show and was ignored.

        """
        if record.is_empty:
            return False
        self._progress = (self._progress or ProgressState()).merge(record)
        self._notify()
        return True
