"""Domain port definitions for adapters."""

from __future__ import annotations

from .file_store import RemoteFile, RemoteFileStore

__all__ = ["RemoteFile", "RemoteFileStore"]
