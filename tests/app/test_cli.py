from __future__ import annotations

import pytest

from photodesk.domain.model import PhotoRecord, SiteConfig
from photodesk.domain.processing import ProcessingReport
from photodesk.domain.reconciliation import PublishOutcome, PublishStatus
from photodesk.ui import cli as cli_module

PUBLISHED = PublishOutcome(status=PublishStatus.PUBLISHED, message="Published.")
FAILED = PublishOutcome(status=PublishStatus.FAILED, message="Publish failed: stale.")


@pytest.fixture(autouse=True)
def _keep_test_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # basicConfig(force=True) would remove the caplog handler
    monkeypatch.setattr(cli_module, "configure_logging", lambda **_kwargs: None)


def test_edit_passes_fields_and_tags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_edit(photo_id: str, changes: dict[str, object], **kwargs: object) -> PublishOutcome:
        captured.update(photo_id=photo_id, changes=changes, **kwargs)
        return PUBLISHED

    monkeypatch.setattr(cli_module, "edit_photo", fake_edit)

    cli_module.main(
        [
            "edit",
            "harbor",
            "--title",
            "Harbor",
            "--category",
            "Nature",
            "--no-featured",
            "--add-tag",
            "sea",
            "--add-tag",
            "Long Exposure",
            "--remove-tag",
            "old",
        ]
    )

    assert captured["photo_id"] == "harbor"
    assert captured["changes"] == {"title": "Harbor", "category": "Nature", "featured": False}
    assert captured["add_tags"] == ["sea", "Long Exposure"]
    assert captured["remove_tags"] == ["old"]


def test_edit_without_options_exits_with_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "edit_photo", lambda *_a, **_k: PUBLISHED)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["edit", "harbor"])

    assert excinfo.value.code == 2


def test_failed_publish_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "delete_photos", lambda _ids: FAILED)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["delete", "harbor"])

    assert excinfo.value.code == 1


def test_delete_passes_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[list[str]] = []

    def fake_delete(ids: list[str]) -> PublishOutcome:
        captured.append(ids)
        return PUBLISHED

    monkeypatch.setattr(cli_module, "delete_photos", fake_delete)

    cli_module.main(["delete", "harbor", "alley"])

    assert captured == [["harbor", "alley"]]


def test_list_logs_photos(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    photos = (PhotoRecord(id="harbor", title="Harbor", featured=True), PhotoRecord(id="alley"))
    monkeypatch.setattr(cli_module, "list_photos", lambda: photos)

    with caplog.at_level("INFO"):
        cli_module.main(["list"])

    assert "harbor: Harbor [Uncategorized] *" in caplog.text
    assert "alley: alley [Uncategorized]" in caplog.text


def test_site_config_without_options_shows_current(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setattr(cli_module, "show_site_config", lambda: SiteConfig(site_name="Notes"))

    def unexpected_save(_changes: object) -> PublishOutcome:
        raise AssertionError("save should not be called")

    monkeypatch.setattr(cli_module, "save_site_config", unexpected_save)

    with caplog.at_level("INFO"):
        cli_module.main(["site-config"])

    assert "siteName: Notes" in caplog.text


def test_site_config_collects_changes(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[dict[str, object]] = []

    def fake_save(changes: dict[str, object]) -> PublishOutcome:
        captured.append(changes)
        return PUBLISHED

    monkeypatch.setattr(cli_module, "save_site_config", fake_save)

    cli_module.main(
        [
            "site-config",
            "--site-name",
            "Notes",
            "--hero-tagline",
            "One",
            "--hero-tagline",
            "Two",
            "--hide-scroll-indicator",
        ]
    )

    assert captured == [
        {"site_name": "Notes", "hero_tagline": ("One", "Two"), "show_scroll_indicator": False}
    ]


def test_process_exits_nonzero_on_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "process_uploads", lambda: ProcessingReport(failed=["x.jpg"]))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["process"])

    assert excinfo.value.code == 1


def test_unexpected_errors_exit_with_status_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom() -> ProcessingReport:
        raise RuntimeError("disk full")

    monkeypatch.setattr(cli_module, "process_uploads", boom)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["process"])

    assert excinfo.value.code == 1


def test_edit_rejects_non_iso_dates_before_staging(monkeypatch: pytest.MonkeyPatch) -> None:
    def unexpected_edit(*_args: object, **_kwargs: object) -> PublishOutcome:
        raise AssertionError("edit should not be called")

    monkeypatch.setattr(cli_module, "edit_photo", unexpected_edit)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["edit", "harbor", "--date", "05/01/2024"])

    assert excinfo.value.code == 2


def test_edit_accepts_iso_and_empty_dates(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[object] = []

    def fake_edit(_photo_id: str, changes: dict[str, object], **_kwargs: object) -> PublishOutcome:
        captured.append(changes["date"])
        return PUBLISHED

    monkeypatch.setattr(cli_module, "edit_photo", fake_edit)

    cli_module.main(["edit", "harbor", "--date", "2024-05-01"])
    cli_module.main(["edit", "harbor", "--date", ""])

    assert captured == ["2024-05-01", ""]
