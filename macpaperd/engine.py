"""Set a wallpaper end to end: discover, build, swap, signal."""

from __future__ import annotations

from pathlib import Path

from macpaperd.dock import DEFAULT_CONSUMER, DEFAULT_KILLALL, restart_dock
from macpaperd.providers import DisplayProvider
from macpaperd.store import BuildReport, build, create_store, encode, populate_identities
from macpaperd.store.encoder import WallpaperSpec
from macpaperd.store.exceptions import BuildError, StorageInitError, SwapFailed
from macpaperd.store.swap import backup_store, commit
from macpaperd.utils.logging import logger


def _prepare_build_path(build_store: Path) -> None:
    try:
        build_store.parent.mkdir(parents=True, exist_ok=True)
        build_store.unlink(missing_ok=True)
    except OSError as e:
        raise StorageInitError(
            f"Cannot clear build path {build_store}: {e}", details={"path": str(build_store)}
        ) from e


def _build_scratch(build_store: Path, displays, spec: WallpaperSpec) -> BuildReport:
    """Create and fill the scratch store; the file is removed if anything fails."""
    store = create_store(build_store)
    try:
        populate_identities(store, displays)
        report = build(store, displays, spec)
        mismatches = store.validate_schema()
        if mismatches:
            raise BuildError(
                "Built store does not match the expected schema",
                details={"mismatches": mismatches},
            )
    except Exception:
        store.close()
        build_store.unlink(missing_ok=True)
        raise
    store.close()
    return report


def set_wallpaper(
    spec: WallpaperSpec,
    provider: DisplayProvider,
    *,
    live_store: str | Path,
    build_store: str | Path,
    backup_dir: str | Path | None = None,
    restart: bool = True,
    killall: str = DEFAULT_KILLALL,
    consumer: str = DEFAULT_CONSUMER,
    restart_timeout: int = 10,
) -> BuildReport:
    """Replace the live store with one configuring ``spec`` on every workspace.

    The live store is untouched until a complete, validated store exists at
    ``build_store``. The Dock is only restarted after a successful swap.

    Raises:
        EncodingError, ProviderError, NoIdentityData, StorageInitError,
        BuildError: before the live store is touched.
        SwapFailed: while backing up or swapping; see ``live_store_removed``.
    """
    live = Path(live_store)
    scratch = Path(build_store)

    encode(spec)
    displays = provider.list_displays()
    logger.info("Found {} display(s)", len(displays))

    _prepare_build_path(scratch)
    report = _build_scratch(scratch, displays, spec)
    logger.info(
        "Built {} pictures, {} preferences, {} data rows for {} workspace(s)",
        report.pictures,
        report.preferences,
        report.data_rows,
        report.workspaces,
    )

    if backup_dir is not None:
        try:
            backup_store(live, backup_dir)
        except OSError as e:
            raise SwapFailed(
                f"Could not back up {live} to {backup_dir}: {e}",
                stage="backup",
                details={"live": str(live), "backup_dir": str(backup_dir)},
            ) from e

    commit(scratch, live)

    if restart:
        restart_dock(killall=killall, consumer=consumer, timeout=restart_timeout)
    else:
        logger.info("Skipping Dock restart; changes apply on its next start")
    return report
