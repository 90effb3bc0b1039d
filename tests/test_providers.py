"""Tests for display providers and the Dock signal."""

import platform
import subprocess

import pytest

from macpaperd import dock
from macpaperd.providers import Display, DisplayProvider, StaticProvider, Workspace
from macpaperd.providers.skylight import SkyLightProvider
from macpaperd.providers.snapshot import StoreSnapshotProvider
from macpaperd.store.database import create_store, populate_identities
from macpaperd.store.exceptions import ProviderError


def test_distinct_workspaces_keep_order():
    display = Display(uuid="D", workspaces=(Workspace("B"), Workspace("A"), Workspace("B", is_fullscreen=True)))
    assert display.distinct_workspace_uuids() == ["B", "A"]


def test_static_provider():
    displays = [Display(uuid="D", workspaces=(Workspace("S"),))]
    provider = StaticProvider(displays)
    assert isinstance(provider, DisplayProvider)
    assert provider.list_displays() == displays


def test_snapshot_reads_identities(store, make_display):
    display = make_display(2)
    populate_identities(store, [display])
    store.insert_display("SECOND-DISPLAY")

    displays = StoreSnapshotProvider(store.db_path).list_displays()

    assert [d.uuid for d in displays] == [display.uuid, "SECOND-DISPLAY"]
    assert displays[0].workspaces == display.workspaces
    assert displays[1].workspaces == ()


def test_snapshot_empty_store(store):
    assert StoreSnapshotProvider(store.db_path).list_displays() == []


def test_snapshot_missing_file(tmp_path):
    with pytest.raises(ProviderError, match="Store not found"):
        StoreSnapshotProvider(tmp_path / "none.db").list_displays()


def test_snapshot_not_a_store(tmp_path):
    path = tmp_path / "other.db"
    path.write_bytes(b"")
    with pytest.raises(ProviderError, match="not a wallpaper store"):
        StoreSnapshotProvider(path).list_displays()


@pytest.mark.skipif(platform.system() == "Darwin", reason="discovery works on macOS")
def test_skylight_requires_macos():
    with pytest.raises(ProviderError, match="needs macOS"):
        SkyLightProvider().list_displays()


@pytest.mark.skipif(platform.system() != "Darwin", reason="needs a window server")
def test_skylight_lists_displays():
    displays = SkyLightProvider().list_displays()
    assert all(d.uuid for d in displays)


def test_restart_dock_runs_killall(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(dock.subprocess, "run", fake_run)
    assert dock.restart_dock()
    assert calls == [["/usr/bin/killall", "Dock"]]


def test_restart_dock_never_raises(monkeypatch):
    monkeypatch.setattr(
        dock.subprocess, "run", lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 1, "", "No matching processes")
    )
    assert not dock.restart_dock()


def test_restart_dock_missing_binary():
    assert not dock.restart_dock(killall="/nonexistent/killall-for-tests")


@pytest.mark.parametrize("dirname", ["a#b", "what?", "100%25 done"])
def test_snapshot_path_with_uri_characters(tmp_path, dirname, make_display):
    path = tmp_path / dirname / "desktoppicture.db"
    path.parent.mkdir()
    display = make_display(1)
    with create_store(path) as db:
        populate_identities(db, [display])

    displays = StoreSnapshotProvider(path).list_displays()

    assert [d.uuid for d in displays] == [display.uuid]
