"""Uploading new originals for the batch processor to pick up."""

from __future__ import annotations

from logging import getLogger
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from photodesk.config.paths import SitePaths
from photodesk.domain.errors import ValidationError

if TYPE_CHECKING:
    from photodesk.domain.model import RemotePath, VersionTag
    from photodesk.domain.ports import RemoteFileStore

log = getLogger(__name__)


def upload_target(name: str, paths: SitePaths | None = None) -> RemotePath:
    """Remote path for an original named ``name`` (directories are stripped)."""
    filename = PurePosixPath(name.replace("\\", "/")).name.strip()
    if not filename or filename.startswith("."):
        raise ValidationError(f"Invalid upload file name: {name!r}")
    return (paths or SitePaths()).original(filename)


async def upload_original(
    remote: RemoteFileStore,
    name: str,
    content: bytes,
    *,
    paths: SitePaths | None = None,
) -> tuple[RemotePath, VersionTag]:
    """Create a new original; an existing file with that name is a conflict."""
    target = upload_target(name, paths)
    version_tag = await remote.put_file(
        target,
        content,
        message=f"Upload {PurePosixPath(target).name} via admin",
    )
    log.info(f"Uploaded {target}; run the processor and refresh to see it")
    return target, version_tag
