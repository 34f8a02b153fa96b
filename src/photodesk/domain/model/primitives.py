"""Domain primitives: scalar aliases and small helpers shared by the model."""

from __future__ import annotations

import re

type PhotoId = str
type VersionTag = str
type RemotePath = str

_WHITESPACE_RUN = re.compile(r"\s+")
_EXTERNAL_PREFIXES = ("http://", "https://")


def normalize_tag(raw: str) -> str:
    """Trim, lowercase and hyphenate internal whitespace; may return ``""``."""
    return _WHITESPACE_RUN.sub("-", raw.strip().lower())


def normalize_tags(raw: object) -> tuple[str, ...]:
    if not isinstance(raw, list | tuple | set | frozenset):
        return ()
    tags: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        tag = normalize_tag(item)
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def is_local_path(path: str) -> bool:
    """Local repository paths are deleted on publish; absolute URLs never are."""
    return bool(path) and not path.lower().startswith(_EXTERNAL_PREFIXES)
