"""Install a freshly built store over the live one.

The copy is staged next to the live store first, so the old store is only
removed once a complete new file sits on the same filesystem, ready to be
renamed into place.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from macpaperd.utils.logging import logger

from .exceptions import SwapFailed

STAGING_SUFFIX = ".macpaperd-new"


def _staging_path(live: Path) -> Path:
    return live.with_name(live.name + STAGING_SUFFIX)


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def commit(built_store: str | Path, live_store: str | Path) -> Path:
    """Replace whatever is at ``live_store`` with a copy of ``built_store``.

    Returns:
        The live store path.

    Raises:
        SwapFailed: with ``stage`` set to where it failed. A failure at
            ``placement``, or a directory at the live path only partly
            removed, sets ``live_store_removed``.
    """
    built = Path(built_store)
    live = Path(live_store)
    staged = _staging_path(live)

    try:
        live.parent.mkdir(parents=True, exist_ok=True)
        _remove(staged)
        shutil.copyfile(built, staged)
    except OSError as e:
        staged.unlink(missing_ok=True)
        raise SwapFailed(
            f"Could not stage new store at {staged}: {e}",
            stage="staging",
            details={"built": str(built), "live": str(live)},
        ) from e

    had_live = os.path.lexists(live)
    try:
        if had_live:
            _remove(live)
    except OSError as e:
        # A directory rmtree gave up on may already be half gone.
        if live.is_file():
            staged.unlink(missing_ok=True)
            raise SwapFailed(
                f"Could not remove old store {live}: {e}",
                stage="removal",
                details={"built": str(built), "live": str(live)},
            ) from e
        raise SwapFailed(
            f"Old store at {live} only partly removed: {e}. The new store is at {staged}.",
            stage="removal",
            live_store_removed=True,
            details={"built": str(built), "live": str(live), "staged": str(staged)},
        ) from e

    try:
        os.replace(staged, live)
    except OSError as e:
        raise SwapFailed(
            f"Old store removed but new store could not be placed at {live}: {e}. "
            f"The new store is at {staged}.",
            stage="placement",
            live_store_removed=True,
            details={"built": str(built), "live": str(live), "staged": str(staged)},
        ) from e

    logger.info("Installed new store at {}", live)
    return live


def backup_store(live_store: str | Path, backup_dir: str | Path) -> Path | None:
    """Copy the live store into ``backup_dir``.

    The first backup is ``desktoppicture.db``; later ones are numbered by how
    many backups already exist (``desktoppicture2.db``, ...).

    Returns:
        The backup path, or None when there is no live store to back up.
    """
    live = Path(live_store)
    if not live.is_file():
        logger.info("No store at {}, nothing to back up", live)
        return None

    backups = Path(backup_dir)
    backups.mkdir(parents=True, exist_ok=True)
    existing = sum(1 for _ in backups.iterdir())
    if existing == 0:
        target = backups / live.name
    else:
        target = backups / f"{live.stem}{existing + 1}{live.suffix}"
    while target.exists():
        existing += 1
        target = backups / f"{live.stem}{existing + 1}{live.suffix}"

    shutil.copyfile(live, target)
    logger.info("Backed up {} to {}", live, target)
    return target
