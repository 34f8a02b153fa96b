"""Result values reported by publish-style operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from photodesk.domain.model import VersionTag


class PublishStatus(StrEnum):
    NO_CHANGES = "no_changes"
    PUBLISHED = "published"
    FAILED = "failed"
    BUSY = "busy"


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    """What a publish attempt did.

    Only the status is a contract: anything other than ``PUBLISHED`` means the
    local staged state is untouched and the attempt can be repeated. ``message``
    is meant for humans.
    """

    status: PublishStatus
    message: str = ""
    version_tag: VersionTag | None = None
    edited: int = 0
    deleted: int = 0
    file_errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status in {PublishStatus.PUBLISHED, PublishStatus.NO_CHANGES}

    @property
    def retry_safe(self) -> bool:
        return self.status in {PublishStatus.FAILED, PublishStatus.BUSY}
