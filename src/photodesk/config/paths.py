"""Fixed repository paths and batch-processing defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .env import optional_env_var

MANIFEST_PATH: Final[str] = "photos.json"
SITE_CONFIG_PATH: Final[str] = "site-config.json"
ORIGINALS_DIR: Final[str] = "photos/uploads"
THUMBS_DIR: Final[str] = "photos/thumbs"

THUMB_WIDTH: Final[int] = 1200
THUMB_QUALITY: Final[int] = 88
IMAGE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".jpg", ".jpeg", ".png", ".tif", ".tiff", ".heic", ".heif", ".webp"}
)


@dataclass(frozen=True, slots=True)
class SitePaths:
    """Repository-relative locations shared by the admin client and the processor."""

    manifest: str = MANIFEST_PATH
    site_config: str = SITE_CONFIG_PATH
    originals_dir: str = ORIGINALS_DIR
    thumbs_dir: str = THUMBS_DIR

    def original(self, filename: str) -> str:
        return f"{self.originals_dir}/{filename}"

    def thumbnail(self, photo_id: str) -> str:
        return f"{self.thumbs_dir}/{photo_id}.jpg"


@dataclass(frozen=True, slots=True)
class ProcessingConfig:
    paths: SitePaths = field(default_factory=SitePaths)
    thumb_width: int = THUMB_WIDTH
    thumb_quality: int = THUMB_QUALITY
    image_extensions: frozenset[str] = IMAGE_EXTENSIONS
    default_camera: str = ""


def get_processing_config() -> ProcessingConfig:
    return ProcessingConfig(default_camera=optional_env_var("PHOTODESK_DEFAULT_CAMERA"))
