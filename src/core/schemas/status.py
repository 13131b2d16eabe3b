"""Pydantic models for the status records pushed by the ingestion server."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class JobKind(StrEnum):
    """Server-side jobs that can be triggered for a repository."""

    INGEST = "ingest"
    SYNC = "sync"


class Credentials(BaseModel):
    """Opaque credentials forwarded to the server untouched.

    Attributes
    ----------
    username : str
        Account name for private repositories (default: ``""``).
    pat : str
        Personal access token for private repositories (default: ``""``).

    """

    model_config = ConfigDict(frozen=True)

    username: str = ""
    pat: str = ""


class StatusRecord(BaseModel):
    """One partial status update received from the event stream.

    Every field is optional. An empty ``message`` carries no information
    and is normalised to ``None``.

    Attributes
    ----------
    message : str | None
        Free-text description of what the pipeline is doing.
    step : int | None
        Index of the current pipeline step.
    total_steps : int | None
        Number of steps in the pipeline.
    progress : float | None
        Completion of the current step, in percent.

    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    message: str | None = None
    step: int | None = Field(default=None, ge=0)
    total_steps: int | None = Field(default=None, ge=0)
    progress: float | None = Field(default=None, allow_inf_nan=False)

    @field_validator("message")
    @classmethod
    def blank_message_is_absent(cls, v: str | None) -> str | None:
        """Treat an empty ``message`` as if it were not sent."""
        return v or None

    @property
    def is_empty(self) -> bool:
        """Whether the record sets no field at all."""
        return all(getattr(self, name) is None for name in ("message", "step", "total_steps", "progress"))

    @classmethod
    def from_payload(cls, payload: Any) -> StatusRecord | None:  # noqa: ANN401
        """Validate a decoded stream payload.

        Parameters
        ----------
        payload : Any
            The JSON-decoded ``data`` of a stream event.

        Returns
        -------
        StatusRecord | None
            The record, or ``None`` when the payload is missing or does not have the
            expected shape.

        """
        if payload is None:
            return None
        if not isinstance(payload, dict):
            logger.warning("Ignoring status payload of type %s", type(payload).__name__)
            return None
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Ignoring malformed status record: %s", exc.errors(include_url=False))
            return None


class ProgressState(BaseModel):
    """Last known value of every status field since the state was created.

    Attributes
    ----------
    message : str | None
        Last non-empty message.
    step : int | None
        Last reported step.
    total_steps : int | None
        Last reported step count.
    progress : float | None
        Last reported percentage.

    """

    model_config = ConfigDict(frozen=True)

    message: str | None = None
    step: int | None = None
    total_steps: int | None = None
    progress: float | None = None

    def merge(self, record: StatusRecord) -> ProgressState:
        """Return a copy updated with every field ``record`` defines.

        Fields the record leaves undefined keep their current value.
        """
        update = {
            name: value
            for name in ("message", "step", "total_steps", "progress")
            if (value := getattr(record, name)) is not None
        }
        if not update:
            return self
        return self.model_copy(update=update)


class ProbeReply(BaseModel):
    """Reply of the server to an existence probe.

    Attributes
    ----------
    status : str
        ``"success"`` when the server already knows the repository.

    """

    model_config = ConfigDict(extra="allow")

    status: str

    @property
    def exists(self) -> bool:
        """Whether the reply confirms the repository."""
        return self.status == "success"
