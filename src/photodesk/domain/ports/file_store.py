"""Port for the remote, versioned file store that hosts the gallery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from photodesk.domain.model.primitives import RemotePath, VersionTag


@dataclass(frozen=True, slots=True)
class RemoteFile:
    """File content together with the version tag it was read at."""

    path: RemotePath
    content: bytes
    version_tag: VersionTag


@runtime_checkable
class RemoteFileStore(Protocol):
    """Path-addressed get/put/delete with compare-and-swap writes.

    Implementations raise :class:`~photodesk.domain.errors.NotFoundError` for
    absent paths, :class:`~photodesk.domain.errors.ConflictError` when a
    supplied version tag is stale, and
    :class:`~photodesk.domain.errors.TransportError` for everything else.
    """

    async def get_file(self, path: RemotePath) -> RemoteFile: ...

    async def put_file(
        self,
        path: RemotePath,
        content: bytes,
        *,
        version_tag: VersionTag | None = None,
        message: str | None = None,
    ) -> VersionTag:
        """Write ``content``; omit ``version_tag`` only when creating the path."""
        ...

    async def delete_file(self, path: RemotePath, *, message: str | None = None) -> None:
        """Delete ``path``, resolving its current version tag internally."""
        ...


__all__ = ["RemoteFile", "RemoteFileStore"]
