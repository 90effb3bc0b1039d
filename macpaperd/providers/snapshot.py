"""Read display and Space identities back out of an existing store."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from macpaperd.store.exceptions import ProviderError
from macpaperd.utils.logging import logger

from . import Display, Workspace


class StoreSnapshotProvider:
    """Provider backed by the identities a desktoppicture.db already holds.

    The store does not say which display a Space belongs to reliably, so
    every Space is attached to the first display. That matches what the
    builder configures anyway.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)

    def list_displays(self) -> list[Display]:
        if not self.db_path.is_file():
            raise ProviderError(
                f"Store not found: {self.db_path}. The wallpaper must have been set "
                "once through System Settings before its identities can be reused.",
                details={"path": str(self.db_path)},
            )

        try:
            conn = sqlite3.connect(f"{self.db_path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as e:
            raise ProviderError(f"Cannot open {self.db_path}: {e}") from e

        try:
            display_uuids = [
                row[0]
                for row in conn.execute("SELECT display_uuid FROM displays ORDER BY ROWID")
            ]
            space_uuids = [
                row[0] for row in conn.execute("SELECT space_uuid FROM spaces ORDER BY ROWID")
            ]
        except sqlite3.Error as e:
            raise ProviderError(
                f"{self.db_path} is not a wallpaper store: {e}", details={"path": str(self.db_path)}
            ) from e
        finally:
            conn.close()

        logger.debug(
            "Read {} displays and {} spaces from {}", len(display_uuids), len(space_uuids), self.db_path
        )
        if not display_uuids:
            return []

        workspaces = tuple(Workspace(uuid=str(uuid)) for uuid in space_uuids)
        displays = [Display(uuid=str(display_uuids[0]), workspaces=workspaces)]
        displays.extend(Display(uuid=str(uuid)) for uuid in display_uuids[1:])
        return displays
