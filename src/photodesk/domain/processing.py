"""Turning newly uploaded originals into stub manifest entries.

Pure planning only: decoding images and writing thumbnails lives in
``photodesk.adapters.imaging``, and the filesystem walk in ``photodesk.app``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from photodesk.domain.model import Category, PhotoRecord

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from photodesk.config.paths import SitePaths

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(filename: str) -> str:
    """Filesystem-safe id for ``filename``: lowercase, extension dropped, hyphenated."""
    stem = re.sub(r"\.[^.]+$", "", filename.lower())
    return _NON_ALNUM_RUN.sub("-", stem).strip("-")


@dataclass(frozen=True, slots=True)
class ImageInfo:
    """What could be learned from decoding an original."""

    width: int = 0
    height: int = 0
    camera: str = ""
    date: str = ""
    has_gps: bool = False


@dataclass(frozen=True, slots=True)
class PendingImage:
    filename: str
    photo_id: str


@dataclass(slots=True)
class ProcessingReport:
    processed: int = 0
    skipped: int = 0
    failed: list[str] = field(default_factory=list)
    added: list[PhotoRecord] = field(default_factory=list)

    @property
    def added_ids(self) -> list[str]:
        return [record.id for record in self.added]


def is_image_name(filename: str, extensions: Collection[str]) -> bool:
    if filename.startswith("."):
        return False
    return PurePosixPath(filename).suffix.lower() in extensions


def plan_new_images(
    filenames: Iterable[str],
    known_ids: Collection[str],
    *,
    extensions: Collection[str],
) -> tuple[list[PendingImage], int]:
    """Pick the image files whose derived id is not in the manifest yet.

    Returns the work list (sorted by filename) and the number of already-known files.
    Two files slugifying to the same id are processed once, first name wins.
    """
    pending: list[PendingImage] = []
    seen = set(known_ids)
    skipped = 0
    for filename in sorted(filenames):
        if not is_image_name(filename, extensions):
            continue
        photo_id = slugify(filename)
        if not photo_id or photo_id in seen:
            skipped += 1
            continue
        seen.add(photo_id)
        pending.append(PendingImage(filename=filename, photo_id=photo_id))
    return pending, skipped


def build_stub_record(image: PendingImage, info: ImageInfo, paths: SitePaths) -> PhotoRecord:
    """Manifest entry for a fresh upload; the text fields are filled in via the admin."""
    return PhotoRecord(
        id=image.photo_id,
        src=paths.original(image.filename),
        thumb=paths.thumbnail(image.photo_id),
        date=info.date,
        category=Category.UNCATEGORIZED,
        camera=info.camera,
        width=info.width,
        height=info.height,
        featured=False,
    )
