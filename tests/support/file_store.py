"""In-memory implementation of the remote file store port for testing."""

from __future__ import annotations

import hashlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from photodesk.domain.errors import ConflictError, NotFoundError, PhotoDeskError
from photodesk.domain.ports import RemoteFile


def content_tag(content: bytes) -> str:
    return hashlib.sha1(content).hexdigest()  # noqa: S324


@dataclass(slots=True)
class Call:
    method: str
    path: str
    version_tag: str | None = None
    message: str | None = None


@dataclass
class InMemoryFileStore:
    """Versioned files keyed by path, with compare-and-swap writes.

    ``before_get`` / ``before_put`` hooks run ahead of the operation and may mutate
    the store (simulating a concurrent external writer) or await something.
    ``delete_errors`` and ``put_errors`` inject failures per path.
    """

    files: dict[str, bytes] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    delete_errors: dict[str, PhotoDeskError] = field(default_factory=dict)
    put_errors: dict[str, PhotoDeskError] = field(default_factory=dict)
    before_get: Callable[[str], Awaitable[None]] | None = None
    before_put: Callable[[str], Awaitable[None]] | None = None

    def seed(self, path: str, content: bytes | str, *, tag: str | None = None) -> str:
        """Write ``content`` as an external writer would; returns the new version tag."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        self.files[path] = data
        self.tags[path] = tag or content_tag(data)
        return self.tags[path]

    def tag_of(self, path: str) -> str:
        return self.tags[path]

    def calls_for(self, method: str) -> list[Call]:
        return [call for call in self.calls if call.method == method]

    async def get_file(self, path: str) -> RemoteFile:
        self.calls.append(Call("get", path))
        if self.before_get is not None:
            await self.before_get(path)
        if path not in self.files:
            raise NotFoundError(f"{path} not found", key=path)
        return RemoteFile(path=path, content=self.files[path], version_tag=self.tags[path])

    async def put_file(
        self,
        path: str,
        content: bytes,
        *,
        version_tag: str | None = None,
        message: str | None = None,
    ) -> str:
        self.calls.append(Call("put", path, version_tag=version_tag, message=message))
        if self.before_put is not None:
            await self.before_put(path)
        if path in self.put_errors:
            raise self.put_errors[path]
        if path in self.files:
            if version_tag != self.tags[path]:
                raise ConflictError(f"{path} does not match {version_tag}")
        elif version_tag is not None:
            raise ConflictError(f"{path} does not exist at {version_tag}")
        return self.seed(path, content)

    async def delete_file(self, path: str, *, message: str | None = None) -> None:
        self.calls.append(Call("delete", path, message=message))
        if path in self.delete_errors:
            raise self.delete_errors[path]
        if path not in self.files:
            raise NotFoundError(f"{path} not found", key=path)
        del self.files[path]
        del self.tags[path]
