"""Public interface for the GitHub contents adapter."""

from __future__ import annotations

from .client import GitHubContentsStore
from .schema import ContentPayload, ErrorResponse, WriteResponse

__all__ = [
    "ContentPayload",
    "ErrorResponse",
    "GitHubContentsStore",
    "WriteResponse",
]
