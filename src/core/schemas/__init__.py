"""Module containing the schema definitions for the console core."""

from core.schemas.status import Credentials, JobKind, ProbeReply, ProgressState, StatusRecord

__all__ = ["Credentials", "JobKind", "ProbeReply", "ProgressState", "StatusRecord"]
