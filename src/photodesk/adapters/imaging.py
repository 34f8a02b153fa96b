"""Pillow-backed thumbnail generation and EXIF extraction."""

from __future__ import annotations

from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

from PIL import ExifTags, Image, ImageOps
from pillow_heif import register_heif_opener

from photodesk.domain.processing import ImageInfo

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

register_heif_opener()

_EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


class ImageProcessingError(RuntimeError):
    """Raised when an original cannot be decoded or its thumbnail written."""


def _text(value: object) -> str:
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    if not isinstance(value, str):
        return ""
    return value.strip().strip("\x00").strip()


def format_camera(make: object, model: object, default: str = "") -> str:
    parts = [part for part in (_text(make), _text(model)) if part]
    return " ".join(parts) or default


def format_exif_date(value: object) -> str:
    """``YYYY:MM:DD HH:MM:SS`` (the EXIF convention) as ``YYYY-MM-DD``; ``""`` if unusable."""
    text = _text(value)
    if not text:
        return ""
    for candidate in (text, text[:19]):
        try:
            return datetime.strptime(candidate, _EXIF_DATE_FORMAT).date().isoformat()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError:
        return ""


def read_exif(image: Image.Image, *, default_camera: str = "") -> tuple[str, str, bool]:
    """Return ``(camera, date, has_gps)`` from the image's EXIF block."""
    exif = image.getexif()
    if not exif:
        return default_camera, "", False

    sub_ifd = exif.get_ifd(ExifTags.IFD.Exif)
    taken = sub_ifd.get(ExifTags.Base.DateTimeOriginal) or exif.get(ExifTags.Base.DateTime)
    camera = format_camera(
        exif.get(ExifTags.Base.Make), exif.get(ExifTags.Base.Model), default_camera
    )
    has_gps = bool(exif.get_ifd(ExifTags.IFD.GPSInfo))
    return camera, format_exif_date(taken), has_gps


def create_thumbnail(
    source: Path,
    destination: Path,
    *,
    width: int,
    quality: int,
    default_camera: str = "",
) -> ImageInfo:
    """Write a JPEG thumbnail no wider than ``width`` and describe the original.

    Width/height are those of the decoded original. EXIF problems are logged
    and leave camera/date at their defaults; decode or write failures raise
    :class:`ImageProcessingError`.
    """

    try:
        with Image.open(source) as original:
            original_width, original_height = original.size
            camera, taken, has_gps = default_camera, "", False
            try:
                camera, taken, has_gps = read_exif(original, default_camera=default_camera)
            except (OSError, ValueError, KeyError, TypeError) as exc:
                log.warning(f"EXIF read failed for {source.name}: {exc}")

            oriented = ImageOps.exif_transpose(original)
            if oriented.width > width:
                height = max(round(oriented.height * width / oriented.width), 1)
                oriented = oriented.resize((width, height), Image.Resampling.LANCZOS)
            destination.parent.mkdir(parents=True, exist_ok=True)
            oriented.convert("RGB").save(destination, "JPEG", quality=quality, optimize=True)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageProcessingError(f"Cannot process {source.name}: {exc}") from exc

    return ImageInfo(
        width=original_width,
        height=original_height,
        camera=camera,
        date=taken,
        has_gps=has_gps,
    )
