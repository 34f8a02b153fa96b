"""Staged edits and deletions layered over the last committed manifest.

The store never performs I/O. Every method runs to completion synchronously, so
between two awaits of an in-flight publish the store is always consistent.

Effective view::

    effective ids = baseline ids - pending-deletion ids
    effective record = overlay[id] if present else baseline[id]

Overlay entries are always complete records; a staged deletion hides its record
immediately, while the backing files are only removed at publish time.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from photodesk.domain.errors import NotFoundError
from photodesk.domain.model import Manifest, PhotoRecord, normalize_tag

if TYPE_CHECKING:
    from collections.abc import Iterable

    from photodesk.domain.model import PhotoId, VersionTag

log = getLogger(__name__)


class ChangeKind(StrEnum):
    LOADED = "loaded"
    EDITED = "edited"
    REVERTED = "reverted"
    DELETED = "deleted"
    PUBLISHED = "published"


@dataclass(frozen=True, slots=True)
class StoreChange:
    """Notification delivered to subscribers after each mutation."""

    kind: ChangeKind
    ids: tuple[PhotoId, ...] = ()


type StoreListener = Callable[[StoreChange], None]


class ReconciliationStore:
    """Baseline manifest + dirty overlay + pending deletions."""

    def __init__(self, manifest: Manifest | None = None) -> None:
        self._baseline: tuple[PhotoRecord, ...] = ()
        self._index: dict[PhotoId, PhotoRecord] = {}
        self._version_tag: VersionTag | None = None
        self._overlay: dict[PhotoId, PhotoRecord] = {}
        self._pending: dict[PhotoId, PhotoRecord] = {}
        self._listeners: list[StoreListener] = []
        self._generation = 0
        if manifest is not None:
            self.load(manifest)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self, manifest: Manifest) -> None:
        """Replace the baseline and discard every staged change."""
        records: list[PhotoRecord] = []
        index: dict[PhotoId, PhotoRecord] = {}
        for record in manifest.photos:
            if record.id in index:
                log.warning("Ignoring duplicate photo id %r while loading", record.id)
                continue
            index[record.id] = record
            records.append(record)

        self._baseline = tuple(records)
        self._index = index
        self._version_tag = manifest.version_tag
        self._overlay = {}
        self._pending = {}
        self._generation += 1
        log.debug(f"Loaded {len(records)} photos at version {manifest.version_tag}")
        self._notify(ChangeKind.LOADED, tuple(index))

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register ``listener`` for change notifications; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Read-through accessors
    # ------------------------------------------------------------------

    @property
    def version_tag(self) -> VersionTag | None:
        return self._version_tag

    @property
    def generation(self) -> int:
        """Incremented by every :meth:`load`; lets a publish detect a reload."""
        return self._generation

    def baseline(self) -> tuple[PhotoRecord, ...]:
        return self._baseline

    def effective_record(self, photo_id: PhotoId) -> PhotoRecord | None:
        if photo_id in self._pending:
            return None
        overlay = self._overlay.get(photo_id)
        if overlay is not None:
            return overlay
        return self._index.get(photo_id)

    def require(self, photo_id: PhotoId) -> PhotoRecord:
        record = self.effective_record(photo_id)
        if record is None:
            raise NotFoundError(f"No photo with id {photo_id!r}", key=photo_id)
        return record

    def effective_list(self) -> tuple[PhotoRecord, ...]:
        return tuple(
            self._overlay.get(record.id, record)
            for record in self._baseline
            if record.id not in self._pending
        )

    def is_dirty(self, photo_id: PhotoId) -> bool:
        return photo_id in self._overlay

    def dirty_ids(self) -> tuple[PhotoId, ...]:
        return tuple(self._overlay)

    def overlay(self) -> dict[PhotoId, PhotoRecord]:
        return dict(self._overlay)

    def pending_deletions(self) -> tuple[PhotoRecord, ...]:
        return tuple(self._pending.values())

    def pending_change_count(self) -> int:
        return len(self._overlay) + len(self._pending)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def stage_edit(
        self,
        photo_id: PhotoId,
        changes: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> PhotoRecord:
        """Merge ``changes`` into the effective record and stage the result."""
        current = self.require(photo_id)
        updated = current.merged({**(changes or {}), **fields})
        self._overlay[photo_id] = updated
        self._notify(ChangeKind.EDITED, (photo_id,))
        return updated

    def stage_tag_add(self, photo_id: PhotoId, raw_tag: str) -> PhotoRecord:
        current = self.require(photo_id)
        tag = normalize_tag(raw_tag)
        if not tag or tag in current.tags:
            return current
        return self.stage_edit(photo_id, {"tags": [*current.tags, tag]})

    def stage_tag_remove(self, photo_id: PhotoId, tag: str) -> PhotoRecord:
        current = self.require(photo_id)
        normalized = normalize_tag(tag)
        if normalized not in current.tags:
            return current
        return self.stage_edit(
            photo_id, {"tags": [existing for existing in current.tags if existing != normalized]}
        )

    def stage_delete(self, photo_id: PhotoId) -> PhotoRecord:
        """Hide the record now; its files are removed by the next publish."""
        snapshot = self.require(photo_id)
        self._pending[photo_id] = snapshot
        self._overlay.pop(photo_id, None)
        self._notify(ChangeKind.DELETED, (photo_id,))
        return snapshot

    def revert(self, photo_id: PhotoId) -> bool:
        """Drop the staged edit for ``photo_id``; returns False when there was none."""
        if self._overlay.pop(photo_id, None) is None:
            return False
        self._notify(ChangeKind.REVERTED, (photo_id,))
        return True

    # ------------------------------------------------------------------
    # Publish support
    # ------------------------------------------------------------------

    def merged_photos(
        self,
        overlay: Mapping[PhotoId, PhotoRecord],
        deleted_ids: Iterable[PhotoId],
    ) -> tuple[PhotoRecord, ...]:
        """Baseline order with ``overlay`` substituted and ``deleted_ids`` removed."""
        excluded = set(deleted_ids)
        return tuple(
            overlay.get(record.id, record)
            for record in self._baseline
            if record.id not in excluded
        )

    def commit_publish(
        self,
        merged: Iterable[PhotoRecord],
        *,
        version_tag: VersionTag,
        overlay: Mapping[PhotoId, PhotoRecord],
        deleted_ids: Iterable[PhotoId],
        generation: int,
    ) -> bool:
        """Adopt a written manifest as the new baseline.

        Only the captured ``overlay`` entries and ``deleted_ids`` are cleared; changes
        staged while the write was in flight stay staged for the next publish.
        """
        if generation != self._generation:
            log.warning("Store was reloaded during publish; keeping the reloaded state")
            return False

        self._baseline = tuple(merged)
        self._index = {record.id: record for record in self._baseline}
        self._version_tag = version_tag
        for photo_id, record in overlay.items():
            if self._overlay.get(photo_id) is record:
                del self._overlay[photo_id]
        committed_ids = set(overlay)
        for photo_id in deleted_ids:
            self._pending.pop(photo_id, None)
            committed_ids.add(photo_id)
        self._notify(ChangeKind.PUBLISHED, tuple(sorted(committed_ids)))
        return True

    def _notify(self, kind: ChangeKind, ids: tuple[PhotoId, ...]) -> None:
        change = StoreChange(kind=kind, ids=ids)
        for listener in tuple(self._listeners):
            listener(change)
