"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any

from photodesk.adapters.github import GitHubContentsStore
from photodesk.adapters.imaging import ImageProcessingError, create_thumbnail
from photodesk.config import SitePaths, get_github_config, get_processing_config
from photodesk.domain.errors import PhotoDeskError
from photodesk.domain.processing import ProcessingReport, build_stub_record, plan_new_images
from photodesk.domain.reconciliation import (
    PublishCoordinator,
    PublishOutcome,
    ReconciliationStore,
)
from photodesk.domain.site_settings import fetch_site_config, update_site_config
from photodesk.domain.uploads import upload_original

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from photodesk.config import ProcessingConfig
    from photodesk.domain.model import PhotoRecord, RemotePath, SiteConfig
    from photodesk.domain.ports import RemoteFileStore

log = getLogger(__name__)


def build_remote_store() -> RemoteFileStore:
    """GitHub-backed store configured from the environment."""
    return GitHubContentsStore(config=get_github_config())


@dataclass(slots=True)
class AdminSession:
    """One editing session: the staged state and the coordinator publishing it."""

    store: ReconciliationStore
    coordinator: PublishCoordinator

    @classmethod
    async def open(
        cls,
        remote: RemoteFileStore,
        *,
        paths: SitePaths | None = None,
    ) -> AdminSession:
        store = ReconciliationStore()
        coordinator = PublishCoordinator(
            store, remote, manifest_path=(paths or SitePaths()).manifest
        )
        await coordinator.refresh()
        return cls(store=store, coordinator=coordinator)


def list_photos(*, remote: RemoteFileStore | None = None) -> tuple[PhotoRecord, ...]:
    """Current published photos, in manifest order."""

    async def run() -> tuple[PhotoRecord, ...]:
        session = await AdminSession.open(remote or build_remote_store())
        return session.store.effective_list()

    return asyncio.run(run())


def edit_photo(
    photo_id: str,
    changes: Mapping[str, Any],
    *,
    add_tags: Iterable[str] = (),
    remove_tags: Iterable[str] = (),
    remote: RemoteFileStore | None = None,
) -> PublishOutcome:
    """Stage an edit (fields and tags) for one photo and publish it."""

    async def run() -> PublishOutcome:
        session = await AdminSession.open(remote or build_remote_store())
        store = session.store
        if changes:
            store.stage_edit(photo_id, changes)
        for tag in add_tags:
            store.stage_tag_add(photo_id, tag)
        for tag in remove_tags:
            store.stage_tag_remove(photo_id, tag)
        return await session.coordinator.publish()

    return asyncio.run(run())


def delete_photos(
    photo_ids: Sequence[str],
    *,
    remote: RemoteFileStore | None = None,
) -> PublishOutcome:
    """Remove photos from the manifest and delete their repository files."""

    async def run() -> PublishOutcome:
        session = await AdminSession.open(remote or build_remote_store())
        for photo_id in photo_ids:
            session.store.stage_delete(photo_id)
        return await session.coordinator.publish()

    return asyncio.run(run())


def upload_originals(
    files: Sequence[Path],
    *,
    remote: RemoteFileStore | None = None,
) -> tuple[list[RemotePath], list[Path]]:
    """Upload local originals one by one; returns (uploaded paths, failed files)."""

    async def run() -> tuple[list[RemotePath], list[Path]]:
        target_store = remote or build_remote_store()
        uploaded: list[RemotePath] = []
        failed: list[Path] = []
        for file in files:
            log.info(f"Uploading {file.name}")
            try:
                target, _ = await upload_original(target_store, file.name, file.read_bytes())
            except (OSError, PhotoDeskError) as exc:
                log.error(f"Upload of {file.name} failed: {exc}")
                failed.append(file)
                continue
            uploaded.append(target)
        return uploaded, failed

    return asyncio.run(run())


def show_site_config(
    *,
    remote: RemoteFileStore | None = None,
    paths: SitePaths | None = None,
) -> SiteConfig:
    async def run() -> SiteConfig:
        config, _ = await fetch_site_config(
            remote or build_remote_store(), (paths or SitePaths()).site_config
        )
        return config

    return asyncio.run(run())


def save_site_config(
    changes: Mapping[str, Any],
    *,
    remote: RemoteFileStore | None = None,
    paths: SitePaths | None = None,
) -> PublishOutcome:
    return asyncio.run(
        update_site_config(
            remote or build_remote_store(),
            changes,
            path=(paths or SitePaths()).site_config,
        )
    )


def _read_local_manifest(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {"photos": []}
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.warning(f"Could not parse {path.name}, starting fresh: {exc}")
        return {"photos": []}
    if not isinstance(document, dict):
        log.warning(f"{path.name} is not a JSON object, starting fresh")
        return {"photos": []}
    if not isinstance(document.get("photos"), list):
        document["photos"] = []
    return document


def process_uploads(
    root: Path | None = None,
    *,
    config: ProcessingConfig | None = None,
) -> ProcessingReport:
    """Create thumbnails and stub manifest entries for new originals under ``root``.

    Entries already in the manifest are left byte-for-byte alone; reprocessing
    the same directory is a no-op.
    """

    settings = config or get_processing_config()
    paths = settings.paths
    base = root or Path.cwd()
    originals_dir = base / paths.originals_dir
    thumbs_dir = base / paths.thumbs_dir
    manifest_path = base / paths.manifest

    for directory in (originals_dir, thumbs_dir):
        if not directory.exists():
            directory.mkdir(parents=True)
            log.info(f"Created {directory.relative_to(base)}/")

    document = _read_local_manifest(manifest_path)
    entries: list[Any] = document["photos"]
    known_ids = {
        entry["id"]
        for entry in entries
        if isinstance(entry, dict) and isinstance(entry.get("id"), str)
    }

    filenames = [item.name for item in originals_dir.iterdir() if item.is_file()]
    pending, skipped = plan_new_images(
        filenames, known_ids, extensions=settings.image_extensions
    )
    report = ProcessingReport(skipped=skipped)
    if not pending:
        log.info(f"No new images in {paths.originals_dir}/. Nothing to do.")
        return report

    for image in pending:
        log.info(f"Processing {image.filename}")
        try:
            info = create_thumbnail(
                originals_dir / image.filename,
                base / paths.thumbnail(image.photo_id),
                width=settings.thumb_width,
                quality=settings.thumb_quality,
                default_camera=settings.default_camera,
            )
        except ImageProcessingError as exc:
            log.error(f"Failed to process {image.filename}: {exc}")
            report.failed.append(image.filename)
            continue

        if info.has_gps:
            log.warning(
                f"GPS data detected in {image.filename}. It is not stored in the manifest, "
                "but the original still carries it; strip it before publishing if needed."
            )
        record = build_stub_record(image, info, paths)
        report.added.append(record)
        report.processed += 1

    if report.added:
        entries.extend(record.to_dict() for record in report.added)
        manifest_path.write_text(
            json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        log.info(f"{paths.manifest} updated: {len(report.added)} new photo(s) added")

    log.info(
        "Summary: %s processed, %s already known, %s failed",
        report.processed,
        report.skipped,
        len(report.failed),
    )
    return report
