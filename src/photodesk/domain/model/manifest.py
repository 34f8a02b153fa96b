"""The gallery manifest document and its JSON wire format."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from photodesk.domain.errors import ValidationError
from photodesk.domain.model.photo import PhotoRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    from photodesk.domain.model.primitives import VersionTag

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Manifest:
    """Ordered photo records plus the remote version tag they were read at."""

    photos: tuple[PhotoRecord, ...] = ()
    version_tag: VersionTag | None = None

    @classmethod
    def from_records(
        cls,
        records: Iterable[PhotoRecord],
        version_tag: VersionTag | None = None,
    ) -> Manifest:
        return cls(photos=tuple(records), version_tag=version_tag)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(photo.id for photo in self.photos)


def parse_manifest(content: bytes | str, *, version_tag: VersionTag | None = None) -> Manifest:
    """Decode manifest JSON; a malformed document reads as an empty gallery."""

    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError:
            log.warning("Manifest is not valid UTF-8; treating it as empty")
            return Manifest(version_tag=version_tag)
    try:
        document = json.loads(content) if content.strip() else {}
    except json.JSONDecodeError as exc:
        log.warning(f"Manifest is not valid JSON ({exc}); treating it as empty")
        return Manifest(version_tag=version_tag)

    entries = document.get("photos") if isinstance(document, dict) else None
    if not isinstance(entries, list):
        log.warning("Manifest has no 'photos' array; treating it as empty")
        return Manifest(version_tag=version_tag)

    return Manifest.from_records(normalize_entries(entries), version_tag=version_tag)


def normalize_entries(entries: Iterable[object]) -> list[PhotoRecord]:
    """Normalize raw entries, dropping unusable ones and later duplicate ids."""

    records: list[PhotoRecord] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        try:
            record = PhotoRecord.from_mapping(entry)  # type: ignore[arg-type]
        except ValidationError as exc:
            log.warning("Dropping manifest entry %s: %s", index, exc)
            continue
        if record.id in seen:
            log.warning("Dropping manifest entry %s: duplicate id %r", index, record.id)
            continue
        seen.add(record.id)
        records.append(record)
    return records


def serialize_manifest(photos: Iterable[PhotoRecord]) -> bytes:
    """Pretty-printed UTF-8 JSON; identical input always yields identical bytes."""

    document = {"photos": [photo.to_dict() for photo in photos]}
    return (json.dumps(document, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
