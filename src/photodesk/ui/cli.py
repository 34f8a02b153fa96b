from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from photodesk.app import (
    delete_photos,
    edit_photo,
    list_photos,
    process_uploads,
    save_site_config,
    show_site_config,
    upload_originals,
)
from photodesk.config import configure_logging
from photodesk.domain.model import Category

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from photodesk.domain.reconciliation import PublishOutcome

log = logging.getLogger(__name__)

_EDIT_FIELDS = ("title", "location", "date", "description", "category")
_SITE_FIELDS = ("site_name", "hero_eyebrow")


def _iso_date(text: str) -> str:
    if not text.strip():
        return ""
    try:
        return date.fromisoformat(text.strip()).isoformat()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {text!r}, expected YYYY-MM-DD") from None


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the photo gallery manifest")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List published photos")

    edit = subparsers.add_parser("edit", help="Edit one photo's metadata and publish")
    edit.add_argument("photo_id", help="Id of the photo to edit")
    edit.add_argument("--title", type=str)
    edit.add_argument("--location", type=str)
    edit.add_argument("--date", type=_iso_date, help="ISO date (YYYY-MM-DD); empty string clears")
    edit.add_argument("--description", type=str)
    edit.add_argument("--category", type=str, choices=[str(c) for c in Category])
    featured = edit.add_mutually_exclusive_group()
    featured.add_argument("--featured", dest="featured", action="store_true", default=None)
    featured.add_argument("--no-featured", dest="featured", action="store_false")
    edit.add_argument(
        "--add-tag", action="append", default=[], help="Tag to add (repeatable)"
    )
    edit.add_argument(
        "--remove-tag", action="append", default=[], help="Tag to remove (repeatable)"
    )

    delete = subparsers.add_parser("delete", help="Delete photos and their files, then publish")
    delete.add_argument("photo_ids", nargs="+", help="Ids of the photos to delete")

    upload = subparsers.add_parser("upload", help="Upload originals for processing")
    upload.add_argument("files", nargs="+", type=Path, help="Image files to upload")

    site = subparsers.add_parser("site-config", help="Show or update the site config")
    site.add_argument("--site-name", type=str)
    site.add_argument("--hero-eyebrow", type=str)
    site.add_argument(
        "--hero-tagline",
        action="append",
        help="Tagline line (repeatable; replaces the current tagline)",
    )
    tagline = site.add_mutually_exclusive_group()
    tagline.add_argument(
        "--show-hero-tagline", dest="show_hero_tagline", action="store_true", default=None
    )
    tagline.add_argument("--hide-hero-tagline", dest="show_hero_tagline", action="store_false")
    indicator = site.add_mutually_exclusive_group()
    indicator.add_argument(
        "--show-scroll-indicator", dest="show_scroll_indicator", action="store_true", default=None
    )
    indicator.add_argument(
        "--hide-scroll-indicator", dest="show_scroll_indicator", action="store_false"
    )

    subparsers.add_parser(
        "process", help="Generate thumbnails and manifest stubs for new uploads"
    )

    return parser.parse_args(list(argv))


def _edit_changes(args: argparse.Namespace) -> dict[str, Any]:
    changes: dict[str, Any] = {
        name: getattr(args, name) for name in _EDIT_FIELDS if getattr(args, name) is not None
    }
    if args.featured is not None:
        changes["featured"] = args.featured
    return changes


def _site_changes(args: argparse.Namespace) -> dict[str, Any]:
    changes: dict[str, Any] = {
        name: getattr(args, name) for name in _SITE_FIELDS if getattr(args, name) is not None
    }
    if args.hero_tagline is not None:
        changes["hero_tagline"] = tuple(args.hero_tagline)
    for name in ("show_hero_tagline", "show_scroll_indicator"):
        if getattr(args, name) is not None:
            changes[name] = getattr(args, name)
    return changes


def _report(outcome: PublishOutcome) -> None:
    for path in outcome.file_errors:
        log.warning("File not removed (orphaned): %s", path)
    if outcome.ok:
        log.info(outcome.message)
        return
    log.error(outcome.message)
    sys.exit(1)


def _run(args: argparse.Namespace) -> None:
    if args.command == "list":
        for photo in list_photos():
            flags = " *" if photo.featured else ""
            log.info(f"{photo.id}: {photo.display_title} [{photo.category}]{flags}")
    elif args.command == "edit":
        changes = _edit_changes(args)
        if not changes and not args.add_tag and not args.remove_tag:
            raise ValueError("Nothing to edit: pass at least one field or tag option")
        _report(
            edit_photo(
                args.photo_id,
                changes,
                add_tags=args.add_tag,
                remove_tags=args.remove_tag,
            )
        )
    elif args.command == "delete":
        _report(delete_photos(args.photo_ids))
    elif args.command == "upload":
        uploaded, failed = upload_originals(args.files)
        log.info(
            "Uploaded %s file(s). Run the processor, then refresh to edit them.", len(uploaded)
        )
        if failed:
            sys.exit(1)
    elif args.command == "site-config":
        changes = _site_changes(args)
        if not changes:
            for key, value in show_site_config().to_dict().items():
                log.info(f"{key}: {value}")
            return
        _report(save_site_config(changes))
    elif args.command == "process":
        report = process_uploads()
        if report.failed:
            sys.exit(1)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO, force=True)

    try:
        _run(parsed_args)
    except ValueError:
        log.exception("Invalid command")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: loads ``.env`` and installs the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
