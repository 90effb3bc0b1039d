"""Integration tests for the macpaperd CLI."""

import pytest
from click.testing import CliRunner

from macpaperd.cli import cli
from macpaperd.pipeline.ui import console
from macpaperd.store import swap
from macpaperd.store.database import WallpaperStore, create_store, populate_identities
from macpaperd.utils.exit_codes import ExitCodes


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """No user config file; HOME points into tmp_path."""
    monkeypatch.setenv("MACPAPERD_CONFIG", str(tmp_path / "no-config.json"))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setattr(console, "width", 200)


@pytest.fixture
def source_store(tmp_path, make_display):
    """A store holding one display with two workspaces."""
    path = tmp_path / "source.db"
    with create_store(path) as db:
        populate_identities(db, [make_display(2)])
    return path


@pytest.fixture
def target(tmp_path):
    return {
        "live": tmp_path / "Dock" / "desktoppicture.db",
        "build": tmp_path / "build.db",
    }


def _store_args(source_store, target):
    return [
        "--store", str(target["live"]),
        "--build-path", str(target["build"]),
        f"--from-store={source_store}",
        "--no-restart",
    ]


def test_help_lists_commands():
    runner = CliRunner()
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    for name in ("set", "color", "displays", "inspect"):
        assert name in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "macpaperd" in result.output


def test_set_image(image_file, source_store, target):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["set", str(image_file), "--orientation", "fit", "--background", "#202020",
         *_store_args(source_store, target)],
    )
    assert result.exit_code == 0, result.output
    assert "2 workspace(s)" in result.output

    with WallpaperStore(target["live"]) as db:
        assert db.count("pictures") == 6
        assert db.count("data") == 7
        values = [value for _, value in db.fetch_rows("data")]
    resolved = image_file.resolve()
    assert str(resolved) in values
    assert str(resolved.parent) in values


def test_set_color(source_store, target):
    result = CliRunner().invoke(cli, ["color", "FF8000", *_store_args(source_store, target)])
    assert result.exit_code == 0, result.output
    with WallpaperStore(target["live"]) as db:
        assert db.count("preferences") == 6 * 7


def test_from_store_defaults_to_live_store(source_store, tmp_path):
    build = tmp_path / "build.db"
    result = CliRunner().invoke(
        cli,
        ["color", "000000", "--store", str(source_store), "--build-path", str(build),
         "--no-restart", "--from-store"],
    )
    assert result.exit_code == 0, result.output
    with WallpaperStore(source_store) as db:
        assert db.count("spaces") == 2
        assert db.count("pictures") == 6


def test_backup_option(source_store, target, tmp_path):
    target["live"].parent.mkdir()
    target["live"].write_bytes(b"old store")
    result = CliRunner().invoke(
        cli, ["color", "000000", "--backup", *_store_args(source_store, target)]
    )
    assert result.exit_code == 0, result.output
    backup = tmp_path / "Library" / "Application Support" / "Dock" / "backups" / "desktoppicture.db"
    assert backup.read_bytes() == b"old store"


def test_bad_color_is_usage_error(source_store, target):
    result = CliRunner().invoke(cli, ["color", "orange", *_store_args(source_store, target)])
    assert result.exit_code == 2
    assert "Invalid hex color" in result.output
    assert not target["live"].exists()


def test_unsupported_format(tmp_path, source_store, target):
    gif = tmp_path / "anim.gif"
    gif.write_bytes(b"GIF89a")
    result = CliRunner().invoke(cli, ["set", str(gif), *_store_args(source_store, target)])
    assert result.exit_code == ExitCodes.FAILED
    assert "Nothing was changed" in result.output
    assert not target["live"].exists()


def test_missing_identities(tmp_path, target):
    empty = tmp_path / "empty.db"
    create_store(empty).close()
    result = CliRunner().invoke(cli, ["color", "000000", *_store_args(empty, target)])
    assert result.exit_code == ExitCodes.FAILED
    assert "NoIdentityData" in result.output


def test_failed_placement_exit_code(monkeypatch, source_store, target):
    def failing_replace(src, dst):
        raise OSError("read-only file system")

    monkeypatch.setattr(swap.os, "replace", failing_replace)
    result = CliRunner().invoke(cli, ["color", "000000", *_store_args(source_store, target)])
    assert result.exit_code == ExitCodes.STORE_INCONSISTENT
    assert "Do not restart the Dock" in result.output


def test_displays(source_store, make_display):
    result = CliRunner().invoke(cli, ["displays", f"--from-store={source_store}"])
    assert result.exit_code == 0, result.output
    display = make_display(2)
    assert display.uuid in result.output
    assert display.workspaces[1].uuid in result.output


def test_inspect(source_store, target):
    CliRunner().invoke(cli, ["color", "FF8000", *_store_args(source_store, target)])
    result = CliRunner().invoke(cli, ["inspect", str(target["live"])])
    assert result.exit_code == 0, result.output
    assert "Schema matches" in result.output
    assert "transparency" in result.output
    assert "Picture 6" in result.output


def test_inspect_missing_live_store():
    result = CliRunner().invoke(cli, ["inspect"])
    assert result.exit_code == 1
    assert "Store not found" in result.output


def test_background_needs_non_full_orientation(image_file, source_store, target):
    result = CliRunner().invoke(
        cli, ["set", str(image_file), "--background", "#202020", *_store_args(source_store, target)]
    )
    assert result.exit_code == ExitCodes.FAILED
    assert "non-full orientation" in result.output
    assert not target["live"].exists()
