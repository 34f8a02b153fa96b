"""Error taxonomy shared by the store, the publish protocol and the adapters."""

from __future__ import annotations


class PhotoDeskError(Exception):
    """Base class for domain-level failures."""


class NotFoundError(PhotoDeskError, LookupError):
    """Raised when an id or remote path does not exist."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class ConflictError(PhotoDeskError):
    """Raised when a conditional write carries a stale version tag."""


class TransportError(PhotoDeskError):
    """Raised for network, authentication or unexpected remote failures."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(PhotoDeskError, ValueError):
    """Raised when raw data cannot be turned into a domain value."""


__all__ = [
    "ConflictError",
    "NotFoundError",
    "PhotoDeskError",
    "TransportError",
    "ValidationError",
]
