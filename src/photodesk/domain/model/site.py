"""Site-wide presentation settings stored next to the manifest."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType
from typing import Any, ClassVar

from photodesk.domain.errors import ValidationError

log = getLogger(__name__)


def _as_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


@dataclass(frozen=True, slots=True, kw_only=True)
class SiteConfig:
    site_name: str = ""
    hero_eyebrow: str = ""
    hero_tagline: tuple[str, ...] = ()
    show_hero_tagline: bool = True
    show_scroll_indicator: bool = True
    extra: Mapping[str, object] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )

    # attribute name -> JSON key
    JSON_KEYS: ClassVar[Mapping[str, str]] = MappingProxyType(
        {
            "site_name": "siteName",
            "hero_eyebrow": "heroEyebrow",
            "hero_tagline": "heroTagline",
            "show_hero_tagline": "showHeroTagline",
            "show_scroll_indicator": "showScrollIndicator",
        }
    )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> SiteConfig:
        tagline = raw.get("heroTagline")
        lines: tuple[str, ...] = ()
        if isinstance(tagline, list):
            lines = tuple(line for line in tagline if isinstance(line, str))
        known = set(cls.JSON_KEYS.values())
        site_name = raw.get("siteName")
        eyebrow = raw.get("heroEyebrow")
        return cls(
            site_name=site_name if isinstance(site_name, str) else "",
            hero_eyebrow=eyebrow if isinstance(eyebrow, str) else "",
            hero_tagline=lines,
            show_hero_tagline=_as_bool(raw.get("showHeroTagline"), True),
            show_scroll_indicator=_as_bool(raw.get("showScrollIndicator"), True),
            extra=MappingProxyType({k: v for k, v in raw.items() if k not in known}),
        )

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "siteName": self.site_name,
            "heroEyebrow": self.hero_eyebrow,
            "heroTagline": list(self.hero_tagline),
            "showHeroTagline": self.show_hero_tagline,
            "showScrollIndicator": self.show_scroll_indicator,
        }
        for key, value in self.extra.items():
            payload.setdefault(key, value)
        return payload

    def merged(self, changes: Mapping[str, Any]) -> SiteConfig:
        """Apply changes keyed either by attribute name or by JSON key."""
        raw = self.to_dict()
        for key, value in changes.items():
            json_key = self.JSON_KEYS.get(key, key)
            if json_key not in self.JSON_KEYS.values():
                raise ValidationError(f"Unknown site setting: {key}")
            raw[json_key] = list(value) if isinstance(value, tuple) else value
        return SiteConfig.from_mapping(raw)


def parse_site_config(content: bytes | str) -> SiteConfig:
    try:
        document = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.warning(f"Site config is not valid JSON ({exc}); using defaults")
        return SiteConfig()
    if not isinstance(document, dict):
        log.warning("Site config is not a JSON object; using defaults")
        return SiteConfig()
    return SiteConfig.from_mapping(document)


def serialize_site_config(config: SiteConfig) -> bytes:
    return (json.dumps(config.to_dict(), indent=2, ensure_ascii=False) + "\n").encode("utf-8")
