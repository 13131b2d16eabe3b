"""HTTP transport, configuration and rendering for the gevity console."""

from api.client import PipelineClient, PipelineRequestError

__all__ = ["PipelineClient", "PipelineRequestError"]
