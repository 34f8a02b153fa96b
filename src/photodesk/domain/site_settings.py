"""Read and update the site config document (get -> merge -> conditional put)."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from photodesk.config.paths import SITE_CONFIG_PATH
from photodesk.domain.errors import NotFoundError, PhotoDeskError
from photodesk.domain.model import SiteConfig, parse_site_config, serialize_site_config
from photodesk.domain.reconciliation.outcome import PublishOutcome, PublishStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

    from photodesk.domain.model import RemotePath, VersionTag
    from photodesk.domain.ports import RemoteFileStore

log = getLogger(__name__)

SITE_CONFIG_COMMIT_MESSAGE = "Update site config via admin"


async def fetch_site_config(
    remote: RemoteFileStore,
    path: RemotePath = SITE_CONFIG_PATH,
) -> tuple[SiteConfig, VersionTag | None]:
    try:
        remote_file = await remote.get_file(path)
    except NotFoundError:
        return SiteConfig(), None
    return parse_site_config(remote_file.content), remote_file.version_tag


async def update_site_config(
    remote: RemoteFileStore,
    changes: Mapping[str, Any],
    *,
    path: RemotePath = SITE_CONFIG_PATH,
) -> PublishOutcome:
    """Apply ``changes`` directly to the remote site config.

    The document is re-read right before the write so the version tag is fresh;
    a concurrent write in between still fails as a conflict.
    """

    if not changes:
        return PublishOutcome(status=PublishStatus.NO_CHANGES, message="No changes to publish.")

    try:
        current, version_tag = await fetch_site_config(remote, path)
        updated = current.merged(changes)
        if updated == current and version_tag is not None:
            return PublishOutcome(
                status=PublishStatus.NO_CHANGES,
                message="Site config already up to date.",
                version_tag=version_tag,
            )
        new_tag = await remote.put_file(
            path,
            serialize_site_config(updated),
            version_tag=version_tag,
            message=SITE_CONFIG_COMMIT_MESSAGE,
        )
    except PhotoDeskError as exc:
        log.warning(f"Site config update failed: {exc}")
        return PublishOutcome(
            status=PublishStatus.FAILED,
            message=f"Saving site config failed: {exc}. Nothing was changed; it is safe to retry.",
        )

    log.info("Saved %s at version %s", path, new_tag)
    return PublishOutcome(
        status=PublishStatus.PUBLISHED,
        message="Site config saved.",
        version_tag=new_tag,
        edited=1,
    )
