from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from photodesk.config.paths import MANIFEST_PATH
from tests.support.file_store import InMemoryFileStore

if TYPE_CHECKING:
    from collections.abc import Callable


def _entry(photo_id: str, **overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "id": photo_id,
        "src": f"photos/uploads/{photo_id}.jpg",
        "thumb": f"photos/thumbs/{photo_id}.jpg",
        "title": photo_id.replace("-", " ").title(),
        "description": "",
        "location": "",
        "date": "2024-05-01",
        "category": "Travel",
        "tags": [],
        "camera": "",
        "width": 4000,
        "height": 3000,
        "featured": False,
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def make_entry() -> Callable[..., dict[str, object]]:
    return _entry


@pytest.fixture
def manifest_bytes() -> Callable[..., bytes]:
    def build(*entries: dict[str, object]) -> bytes:
        return (json.dumps({"photos": list(entries)}, indent=2) + "\n").encode("utf-8")

    return build


@pytest.fixture
def remote() -> InMemoryFileStore:
    store = InMemoryFileStore()
    for photo_id in ("harbor", "alley", "summit"):
        store.seed(f"photos/uploads/{photo_id}.jpg", b"original")
        store.seed(f"photos/thumbs/{photo_id}.jpg", b"thumb")
    document = {"photos": [_entry("harbor"), _entry("alley"), _entry("summit")]}
    store.seed(MANIFEST_PATH, json.dumps(document, indent=2) + "\n")
    store.calls.clear()
    return store
