"""Fill ``pictures``, ``preferences`` and ``data`` for one wallpaper request.

The Dock addresses every wallpaper slot twice: each display has a slot with
no display bound and one bound to it, and each Space likewise has a slot
bound to the display and one unbound. All slots get the same preferences.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from macpaperd.providers import Display
from macpaperd.utils.logging import logger

from .database import WallpaperStore
from .encoder import EncodedPreferences, WallpaperSpec, encode
from .exceptions import BuildError

# (bind space, bind display) for each slot a display or Space contributes.
SENTINEL_SLOTS = (
    (False, False),
    (False, True),
)
WORKSPACE_SLOTS = (
    (True, True),
    (True, False),
)


def _bind(flag: bool, row_id: int | None) -> int | None:
    return row_id if flag else None


@dataclass(frozen=True)
class BuildReport:
    """Row counts produced by :func:`build`."""

    pictures: int
    preferences: int
    data_rows: int
    workspaces: int


def picture_slots(display_id: int, space_ids: Sequence[int]) -> Iterator[tuple[int | None, int | None]]:
    """Yield ``(space_id, display_id)`` for every picture row, in insertion order."""
    for bind_space, bind_display in SENTINEL_SLOTS:
        yield (_bind(bind_space, None), _bind(bind_display, display_id))
    for space_id in space_ids:
        for bind_space, bind_display in WORKSPACE_SLOTS:
            yield (_bind(bind_space, space_id), _bind(bind_display, display_id))


def expected_counts(workspace_count: int, key_count: int) -> tuple[int, int]:
    """Pictures and preferences a build must produce."""
    pictures = len(SENTINEL_SLOTS) + len(WORKSPACE_SLOTS) * workspace_count
    return pictures, pictures * key_count


def _resolve_identities(store: WallpaperStore, display: Display) -> tuple[int, list[int]]:
    display_id = store.display_id(display.uuid)
    if display_id is None:
        raise BuildError(
            f"Display {display.uuid} is not in the store", details={"display": display.uuid}
        )
    space_ids = []
    for space_uuid in display.distinct_workspace_uuids():
        space_id = store.space_id(space_uuid)
        if space_id is None:
            raise BuildError(
                f"Space {space_uuid} is not in the store", details={"space": space_uuid}
            )
        space_ids.append(space_id)
    return display_id, space_ids


def _fill(
    store: WallpaperStore, display: Display, encoded: EncodedPreferences
) -> BuildReport:
    display_id, space_ids = _resolve_identities(store, display)

    data_ids = store.insert_data(encoded.data_rows)
    pairs = [(key, data_ids[offset]) for key, offset in encoded.keys]

    pictures = 0
    for space_id, slot_display_id in picture_slots(display_id, space_ids):
        picture_id = store.insert_picture(space_id, slot_display_id)
        store.insert_preferences(picture_id, pairs)
        pictures += 1

    report = BuildReport(
        pictures=pictures,
        preferences=pictures * len(pairs),
        data_rows=len(data_ids),
        workspaces=len(space_ids),
    )
    logger.debug("Added {} rows to pictures", report.pictures)
    logger.debug("Added {} rows to preferences", report.preferences)
    return report


def build(store: WallpaperStore, displays: Sequence[Display], spec: WallpaperSpec) -> BuildReport:
    """Write the pictures/preferences/data rows for ``spec``.

    Only the first display is configured. Its identity rows must already be
    in the store (see :func:`macpaperd.store.database.populate_identities`).
    Runs in a single transaction; nothing is written if any insert fails.

    Raises:
        EncodingError: ``spec`` is invalid (nothing written).
        BuildError: identities are missing or an insert failed.
    """
    if not displays:
        raise BuildError("No display to build pictures for")
    encoded = encode(spec)

    try:
        store.begin_transaction()
        report = _fill(store, displays[0], encoded)
        store.commit()
    except BuildError:
        store.rollback()
        raise
    except sqlite3.Error as e:
        store.rollback()
        raise BuildError(f"Building pictures failed: {e}", details={"store": str(store.db_path)}) from e

    return report
