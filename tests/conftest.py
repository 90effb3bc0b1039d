"""Pytest configuration and fixtures."""

import pytest

from macpaperd.providers import Display, Workspace
from macpaperd.store.database import create_store

DISPLAY_UUID = "37D8832A-2D66-02CA-B9F7-8F30A301B230"


def _make_display(workspace_count: int, uuid: str = DISPLAY_UUID) -> Display:
    """A display with ``workspace_count`` distinct workspaces."""
    return Display(
        uuid=uuid,
        workspaces=tuple(
            Workspace(uuid=f"8E3B2C1A-0000-4000-8000-{i:012d}") for i in range(1, workspace_count + 1)
        ),
    )


@pytest.fixture
def make_display():
    """Factory: ``make_display(n)`` builds a display with n workspaces."""
    return _make_display


@pytest.fixture
def store(tmp_path):
    """Fresh store with the full schema and no rows."""
    db = create_store(tmp_path / "desktoppicture.db")
    yield db
    db.close()


@pytest.fixture
def image_file(tmp_path):
    """An existing .png file (content is never read)."""
    path = tmp_path / "images" / "beach.png"
    path.parent.mkdir()
    path.write_bytes(b"\x89PNG\r\n\x1a\n")
    return path


@pytest.fixture
def dock_calls(monkeypatch):
    """Record Dock restarts instead of running killall."""
    calls = []

    def fake_restart(killall="/usr/bin/killall", consumer="Dock", timeout=10):
        calls.append((killall, consumer, timeout))
        return True

    monkeypatch.setattr("macpaperd.engine.restart_dock", fake_restart)
    return calls
