"""Configuration for the gevity console."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Console settings loaded from environment variables and .env file.

    Attributes
    ----------
    server_url : str
        Base URL of the ingestion server (default: ``"http://localhost:8000"``).
    fetch_repo_path : str
        Endpoint of the existence probe (default: ``"/fetch-repo"``).
    ingest_path : str
        Endpoint that starts an initial ingest (default: ``"/ingest"``).
    sync_path : str
        Endpoint that syncs a known repository to latest (default: ``"/process"``).
    events_path : str
        Server-sent event stream with status records (default: ``"/events"``).
    request_timeout : float
        Timeout in seconds for probe and trigger requests (default: ``30.0``).
    log_level : str
        Level of the root logger when run from the command line (default: ``"INFO"``).
    app_title : str
        Title shown while no repository is selected (default: ``"gevity"``).

    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    server_url: str = "http://localhost:8000"
    fetch_repo_path: str = "/fetch-repo"
    ingest_path: str = "/ingest"
    sync_path: str = "/process"
    events_path: str = "/events"
    request_timeout: float = 30.0
    log_level: str = "INFO"
    app_title: str = "gevity"


@lru_cache
def get_settings() -> Settings:
    """Return the console settings instance (cached).

    Returns
    -------
    Settings
        The console settings.

    """
    s = Settings()
    logger.debug("Settings loaded: server_url=%s", s.server_url)
    return s
