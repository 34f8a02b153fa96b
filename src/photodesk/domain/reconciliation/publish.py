"""Optimistic-concurrency publish of staged changes to the remote file store.

Sequence for one attempt:

1. nothing staged -> ``NO_CHANGES`` without touching the remote
2. delete local ``src``/``thumb`` files of staged deletions (best effort)
3. re-read the manifest's current version tag
4. merge baseline + captured overlay - captured deletions
5. conditional write of the merged manifest
6. on success adopt the merged manifest as baseline; on failure change nothing

Remote errors never escape :meth:`PublishCoordinator.publish`; they come back
as a ``FAILED`` outcome.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from photodesk.config.paths import MANIFEST_PATH
from photodesk.domain.errors import NotFoundError, PhotoDeskError
from photodesk.domain.model import Manifest, parse_manifest, serialize_manifest

from .outcome import PublishOutcome, PublishStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from photodesk.domain.model import PhotoId, PhotoRecord, RemotePath, VersionTag
    from photodesk.domain.ports import RemoteFileStore

    from .store import ReconciliationStore

log = getLogger(__name__)

MANIFEST_COMMIT_MESSAGE = "Update photo metadata via admin"


async def fetch_manifest(
    remote: RemoteFileStore,
    path: RemotePath = MANIFEST_PATH,
) -> Manifest:
    """Read the manifest; an absent file is an empty gallery with no version tag."""

    try:
        remote_file = await remote.get_file(path)
    except NotFoundError:
        log.info(f"{path} does not exist yet; starting from an empty manifest")
        return Manifest()
    return parse_manifest(remote_file.content, version_tag=remote_file.version_tag)


class PublishCoordinator:
    """Drives publish and refresh for one :class:`ReconciliationStore`."""

    def __init__(
        self,
        store: ReconciliationStore,
        remote: RemoteFileStore,
        *,
        manifest_path: RemotePath = MANIFEST_PATH,
    ) -> None:
        self._store = store
        self._remote = remote
        self._manifest_path = manifest_path
        self._in_flight = False
        # ids whose files were already swept by an earlier, failed attempt
        self._swept: set[PhotoId] = set()

    @property
    def busy(self) -> bool:
        return self._in_flight

    async def refresh(self) -> Manifest:
        """Reload the remote manifest, discarding everything staged."""
        manifest = await fetch_manifest(self._remote, self._manifest_path)
        self._store.load(manifest)
        self._swept.clear()
        return manifest

    async def publish(self) -> PublishOutcome:
        if self._in_flight:
            return PublishOutcome(
                status=PublishStatus.BUSY,
                message="A publish is already in progress.",
            )
        if self._store.pending_change_count() == 0:
            return PublishOutcome(status=PublishStatus.NO_CHANGES, message="No changes to publish.")

        self._in_flight = True
        try:
            return await self._publish()
        finally:
            self._in_flight = False

    async def _publish(self) -> PublishOutcome:
        store = self._store
        generation = store.generation
        deletions = store.pending_deletions()
        deleted_ids = {record.id for record in deletions}

        file_errors = await self._sweep(deletions)

        try:
            version_tag = await self._current_version_tag()
            overlay = store.overlay()
            merged = store.merged_photos(overlay, deleted_ids)
            new_tag = await self._remote.put_file(
                self._manifest_path,
                serialize_manifest(merged),
                version_tag=version_tag,
                message=MANIFEST_COMMIT_MESSAGE,
            )
        except PhotoDeskError as exc:
            log.warning(f"Publish failed, staged changes kept: {exc}")
            return PublishOutcome(
                status=PublishStatus.FAILED,
                message=f"Publish failed: {exc}. Nothing was changed; it is safe to retry.",
                file_errors=file_errors,
            )

        store.commit_publish(
            merged,
            version_tag=new_tag,
            overlay=overlay,
            deleted_ids=deleted_ids,
            generation=generation,
        )
        self._swept -= deleted_ids
        log.info(
            "Published %s: %s edited, %s deleted, version %s",
            self._manifest_path,
            len(overlay),
            len(deleted_ids),
            new_tag,
        )
        return PublishOutcome(
            status=PublishStatus.PUBLISHED,
            message="Published. The hosted site may take a moment to update.",
            version_tag=new_tag,
            edited=len(overlay),
            deleted=len(deleted_ids),
            file_errors=file_errors,
        )

    async def _current_version_tag(self) -> VersionTag | None:
        try:
            remote_file = await self._remote.get_file(self._manifest_path)
        except NotFoundError:
            return None
        return remote_file.version_tag

    async def _sweep(self, deletions: Iterable[PhotoRecord]) -> tuple[str, ...]:
        """Delete backing files of removed photos; failures are logged, not raised."""
        failed: list[str] = []
        attempted: set[str] = set()
        for record in deletions:
            if record.id in self._swept:
                continue
            for path, label in ((record.src, "upload"), (record.thumb, "thumbnail")):
                if path not in record.local_paths or path in attempted:
                    continue
                attempted.add(path)
                try:
                    await self._remote.delete_file(path, message=f"Remove {record.id} {label}")
                except NotFoundError:
                    log.debug(f"{path} already absent")
                except PhotoDeskError as exc:
                    log.warning(f"Could not delete {path} for {record.id}: {exc}")
                    failed.append(path)
            self._swept.add(record.id)
        return tuple(failed)
