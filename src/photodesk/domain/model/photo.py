"""Photo metadata records as stored in the gallery manifest.

Every raw JSON entry goes through :meth:`PhotoRecord.from_mapping`. Fields that
are missing or carry the wrong type fall back to their documented defaults; only
an unusable ``id`` is rejected. Empty strings are the canonical "unset" value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import date
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from photodesk.domain.errors import ValidationError
from photodesk.domain.model.enums import Category
from photodesk.domain.model.primitives import is_local_path, normalize_tags

if TYPE_CHECKING:
    from photodesk.domain.model.primitives import PhotoId


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def _as_dimension(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and value.is_integer():
        return max(int(value), 0)
    if isinstance(value, str):
        text = value.strip()
        # isdigit alone accepts superscripts and other non-decimal digits
        if text.isascii() and text.isdigit():
            return int(text)
    return 0


def _as_date(value: object) -> str:
    text = _as_str(value).strip()
    if not text:
        return ""
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        return ""


def _empty_extra() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True, kw_only=True)
class PhotoRecord:
    """One photo's editable metadata."""

    id: PhotoId
    src: str = ""
    thumb: str = ""
    title: str = ""
    description: str = ""
    location: str = ""
    date: str = ""
    category: Category = Category.UNCATEGORIZED
    tags: tuple[str, ...] = ()
    camera: str = ""
    width: int = 0
    height: int = 0
    featured: bool = False
    # keys written by other tooling; carried through untouched
    extra: Mapping[str, object] = field(default_factory=_empty_extra, compare=False)

    FIELD_ORDER: ClassVar[tuple[str, ...]] = (
        "id",
        "src",
        "thumb",
        "title",
        "description",
        "location",
        "date",
        "category",
        "tags",
        "camera",
        "width",
        "height",
        "featured",
    )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> PhotoRecord:
        """Build a normalized record from a raw manifest entry."""
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Photo entry must be an object, got {type(raw).__name__}")
        photo_id = raw.get("id")
        if not isinstance(photo_id, str) or not photo_id.strip():
            raise ValidationError("Photo entry is missing a usable id")

        extra = {key: value for key, value in raw.items() if key not in cls.FIELD_ORDER}
        featured = raw.get("featured")
        return cls(
            id=photo_id.strip(),
            src=_as_str(raw.get("src")),
            thumb=_as_str(raw.get("thumb")),
            title=_as_str(raw.get("title")),
            description=_as_str(raw.get("description")),
            location=_as_str(raw.get("location")),
            date=_as_date(raw.get("date")),
            category=Category.coerce(raw.get("category")),
            tags=normalize_tags(raw.get("tags")),
            camera=_as_str(raw.get("camera")),
            width=_as_dimension(raw.get("width")),
            height=_as_dimension(raw.get("height")),
            featured=featured if isinstance(featured, bool) else False,
            extra=MappingProxyType(extra),
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize in manifest field order, followed by preserved extra keys."""
        payload: dict[str, object] = {}
        for name in self.FIELD_ORDER:
            value = getattr(self, name)
            if name == "category":
                value = str(value)
            elif name == "tags":
                value = list(value)
            payload[name] = value
        for key, value in self.extra.items():
            payload.setdefault(key, value)
        return payload

    def merged(self, changes: Mapping[str, Any]) -> PhotoRecord:
        """Return a complete record with ``changes`` applied on top of this one."""
        unknown = sorted(set(changes) - _EDITABLE_FIELDS - {"id"})
        if unknown:
            raise ValidationError(f"Unknown photo fields: {', '.join(unknown)}")
        if "id" in changes and changes["id"] != self.id:
            raise ValidationError(f"Photo id is immutable ({self.id!r})")
        raw_date = changes.get("date")
        if isinstance(raw_date, str) and raw_date.strip() and not _as_date(raw_date):
            raise ValidationError(f"Invalid date {raw_date!r}: expected YYYY-MM-DD")
        return PhotoRecord.from_mapping({**self.to_dict(), **changes})

    @property
    def local_paths(self) -> tuple[str, ...]:
        """Backing files that live in the repository (``src`` first, then ``thumb``)."""
        paths: list[str] = []
        for path in (self.src, self.thumb):
            if is_local_path(path) and path not in paths:
                paths.append(path)
        return tuple(paths)

    @property
    def display_title(self) -> str:
        return self.title or self.id


_EDITABLE_FIELDS = frozenset(
    f.name for f in fields(PhotoRecord) if f.name not in {"id", "extra"}
)
