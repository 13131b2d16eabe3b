"""Pydantic models for the request bodies sent to the ingestion server."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FetchRepoRequest(BaseModel):
    """Body of the existence probe.

    Attributes
    ----------
    repo_name : str
        Canonical name of the repository.

    """

    repo_name: str = Field(..., description="Canonical repository name")


class JobRequest(BaseModel):
    """Body of the ingest and sync requests.

    Attributes
    ----------
    repo_url : str
        The locator exactly as the operator entered it.
    username : str
        Optional account name for private repositories.
    pat : str
        Optional personal access token for private repositories.

    """

    repo_url: str = Field(..., description="Repository URL or slug")
    username: str = Field(default="", description="Username for private repositories")
    pat: str = Field(default="", description="Personal access token for private repositories")
