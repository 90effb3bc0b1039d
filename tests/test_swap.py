"""Tests for installing a built store and backing up the live one."""

import os
import shutil

import pytest

from macpaperd.store import swap
from macpaperd.store.exceptions import SwapFailed


@pytest.fixture
def built(tmp_path):
    path = tmp_path / "build" / "macpaperd.db"
    path.parent.mkdir()
    path.write_bytes(b"new store")
    return path


@pytest.fixture
def live(tmp_path):
    path = tmp_path / "Dock" / "desktoppicture.db"
    path.parent.mkdir()
    path.write_bytes(b"old store")
    return path


def test_commit_replaces_live(built, live):
    assert swap.commit(built, live) == live
    assert live.read_bytes() == b"new store"
    assert built.exists()
    assert not (live.parent / (live.name + swap.STAGING_SUFFIX)).exists()


def test_commit_without_live_store(built, tmp_path):
    live = tmp_path / "fresh" / "desktoppicture.db"
    swap.commit(built, live)
    assert live.read_bytes() == b"new store"


def test_commit_replaces_directory(built, live):
    live.unlink()
    live.mkdir()
    (live / "junk").write_text("x")
    swap.commit(built, live)
    assert live.is_file()


def test_staging_failure_leaves_live_untouched(tmp_path, live):
    with pytest.raises(SwapFailed) as exc_info:
        swap.commit(tmp_path / "missing.db", live)
    assert exc_info.value.stage == "staging"
    assert not exc_info.value.live_store_removed
    assert live.read_bytes() == b"old store"


def test_removal_failure(monkeypatch, built, live):
    real_remove = swap._remove

    def failing_remove(path):
        if path == live:
            raise PermissionError("denied")
        real_remove(path)

    monkeypatch.setattr(swap, "_remove", failing_remove)
    with pytest.raises(SwapFailed) as exc_info:
        swap.commit(built, live)
    assert exc_info.value.stage == "removal"
    assert not exc_info.value.live_store_removed
    assert live.read_bytes() == b"old store"
    assert not (live.parent / (live.name + swap.STAGING_SUFFIX)).exists()


def test_partial_directory_removal_reports_removed_store(monkeypatch, built, live):
    live.unlink()
    live.mkdir()
    (live / "a").write_bytes(b"a")
    (live / "b").write_bytes(b"b")

    def partial_rmtree(path):
        (path / "a").unlink()
        raise OSError("device busy")

    monkeypatch.setattr(swap.shutil, "rmtree", partial_rmtree)
    with pytest.raises(SwapFailed) as exc_info:
        swap.commit(built, live)
    err = exc_info.value
    assert err.stage == "removal"
    assert err.live_store_removed
    assert err.store_may_be_inconsistent
    staged = live.parent / (live.name + swap.STAGING_SUFFIX)
    assert err.details["staged"] == str(staged)
    assert staged.read_bytes() == b"new store"


def test_placement_failure_reports_removed_store(monkeypatch, built, live):
    def failing_replace(src, dst):
        raise OSError("cross-device link")

    monkeypatch.setattr(os, "replace", failing_replace)
    with pytest.raises(SwapFailed) as exc_info:
        swap.commit(built, live)
    err = exc_info.value
    assert err.stage == "placement"
    assert err.live_store_removed
    assert err.store_may_be_inconsistent
    assert not live.exists()
    assert err.details["staged"].endswith(swap.STAGING_SUFFIX)


def test_unknown_stage():
    with pytest.raises(ValueError):
        SwapFailed("boom", stage="launch")


def test_backup_numbering(tmp_path, live):
    backups = tmp_path / "backups"
    first = swap.backup_store(live, backups)
    second = swap.backup_store(live, backups)
    third = swap.backup_store(live, backups)
    assert [p.name for p in (first, second, third)] == [
        "desktoppicture.db",
        "desktoppicture2.db",
        "desktoppicture3.db",
    ]
    assert third.read_bytes() == b"old store"


def test_backup_skips_taken_names(tmp_path, live):
    backups = tmp_path / "backups"
    backups.mkdir()
    shutil.copyfile(live, backups / "desktoppicture2.db")
    assert swap.backup_store(live, backups).name == "desktoppicture3.db"


def test_backup_without_live_store(tmp_path):
    assert swap.backup_store(tmp_path / "nothing.db", tmp_path / "backups") is None
