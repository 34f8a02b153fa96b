"""Public domain model surface."""

from __future__ import annotations

from photodesk.domain.model.enums import Category
from photodesk.domain.model.manifest import (
    Manifest,
    normalize_entries,
    parse_manifest,
    serialize_manifest,
)
from photodesk.domain.model.photo import PhotoRecord
from photodesk.domain.model.primitives import (
    PhotoId,
    RemotePath,
    VersionTag,
    is_local_path,
    normalize_tag,
    normalize_tags,
)
from photodesk.domain.model.site import SiteConfig, parse_site_config, serialize_site_config

__all__ = [
    "Category",
    "Manifest",
    "PhotoId",
    "PhotoRecord",
    "RemotePath",
    "SiteConfig",
    "VersionTag",
    "is_local_path",
    "normalize_entries",
    "normalize_tag",
    "normalize_tags",
    "parse_manifest",
    "parse_site_config",
    "serialize_manifest",
    "serialize_site_config",
]
