"""Connection wrapper for a desktoppicture.db store."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Sequence
from pathlib import Path

from macpaperd.providers import Display
from macpaperd.utils.logging import logger

from .exceptions import BuildError, NoIdentityData, StorageInitError
from .schema import TABLES, schema_statements, validate_all_tables


def validate_table_name(table: str) -> str:
    """Validate table name against schema to prevent SQL injection."""
    if table not in TABLES:
        raise ValueError(f"Invalid table name: {table}. Must be one of the schema-defined tables.")
    return table


class WallpaperStore:
    """Thin layer over ``sqlite3`` for the six Dock tables.

    Insert helpers return the row id SQLite assigned; callers must use those
    ids rather than predicting them.
    """

    def __init__(self, db_path: str | Path):
        """Open an existing store."""
        self.db_path = Path(db_path)
        # Default rollback journal: WAL would leave -wal/-shm files next to the
        # store and mark the file header as WAL.
        self.conn = sqlite3.connect(str(self.db_path), isolation_level=None)

    def __enter__(self) -> WallpaperStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def begin_transaction(self) -> None:
        """Start a new transaction."""
        self.conn.execute("BEGIN IMMEDIATE")

    def commit(self) -> None:
        """Commit the current transaction."""
        self.conn.execute("COMMIT")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        if self.conn.in_transaction:
            self.conn.execute("ROLLBACK")

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()

    def create_schema(self) -> None:
        """Create every table, index and trigger."""
        cursor = self.conn.cursor()
        for stmt in schema_statements():
            logger.debug(stmt)
            cursor.execute(stmt)

    def validate_schema(self) -> dict[str, list[str]]:
        """Return schema mismatches keyed by table or trigger name."""
        mismatches = validate_all_tables(self.conn.cursor())
        for name, errors in mismatches.items():
            for error in errors:
                logger.warning("Schema mismatch in {}: {}", name, error)
        return mismatches

    # ------------------------------------------------------------------
    # Inserts
    # ------------------------------------------------------------------

    def insert_display(self, display_uuid: str) -> int:
        cursor = self.conn.execute("INSERT INTO displays(display_uuid) VALUES(?)", (display_uuid,))
        return cursor.lastrowid

    def insert_space(self, space_uuid: str) -> int:
        cursor = self.conn.execute("INSERT INTO spaces(space_uuid) VALUES(?)", (space_uuid,))
        return cursor.lastrowid

    def insert_data(self, values: Iterable[str | int | float]) -> list[int]:
        """Append ``values`` to ``data`` in order and return their row ids, index for index."""
        row_ids = []
        for value in values:
            cursor = self.conn.execute("INSERT INTO data(value) VALUES(?)", (value,))
            row_ids.append(cursor.lastrowid)
        return row_ids

    def insert_picture(self, space_id: int | None, display_id: int | None) -> int:
        cursor = self.conn.execute(
            "INSERT INTO pictures(space_id, display_id) VALUES(?, ?)", (space_id, display_id)
        )
        return cursor.lastrowid

    def insert_preferences(self, picture_id: int, pairs: Sequence[tuple[int, int]]) -> None:
        """Attach ``(key, data_id)`` pairs to a picture."""
        self.conn.executemany(
            "INSERT INTO preferences(key, data_id, picture_id) VALUES(?, ?, ?)",
            [(key, data_id, picture_id) for key, data_id in pairs],
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def display_id(self, display_uuid: str) -> int | None:
        row = self.conn.execute(
            "SELECT ROWID FROM displays WHERE display_uuid=? ORDER BY ROWID LIMIT 1",
            (display_uuid,),
        ).fetchone()
        return row[0] if row else None

    def space_id(self, space_uuid: str) -> int | None:
        row = self.conn.execute(
            "SELECT ROWID FROM spaces WHERE space_uuid=? ORDER BY ROWID LIMIT 1",
            (space_uuid,),
        ).fetchone()
        return row[0] if row else None

    def count(self, table: str) -> int:
        validate_table_name(table)
        return self.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def fetch_rows(self, table: str) -> list[tuple]:
        """All rows of ``table`` with their ROWID first, in ROWID order."""
        validate_table_name(table)
        columns = ", ".join(["ROWID", *TABLES[table].column_names()])
        return self.conn.execute(f"SELECT {columns} FROM {table} ORDER BY ROWID").fetchall()

    def dump(self) -> dict[str, list[tuple]]:
        """Every table's rows, for comparisons and diagnostics."""
        return {table: self.fetch_rows(table) for table in TABLES}

    def picture_preferences(self) -> list[tuple[int, int | None, int | None, list[tuple[int, object]]]]:
        """Each picture with its ``(key, value)`` preferences, in ROWID order."""
        pictures = self.fetch_rows("pictures")
        rows = self.conn.execute(
            "SELECT p.picture_id, p.key, d.value FROM preferences p "
            "LEFT JOIN data d ON d.ROWID = p.data_id ORDER BY p.ROWID"
        ).fetchall()
        by_picture: dict[int, list[tuple[int, object]]] = {}
        for picture_id, key, value in rows:
            by_picture.setdefault(picture_id, []).append((key, value))
        return [
            (picture_id, space_id, display_id, by_picture.get(picture_id, []))
            for picture_id, space_id, display_id in pictures
        ]


def create_store(db_path: str | Path) -> WallpaperStore:
    """Create a brand-new store with the full schema at ``db_path``.

    Raises:
        StorageInitError: the path already exists, the file cannot be
            created, or SQLite rejects a schema statement. Nothing is left
            at ``db_path`` when schema creation fails.
    """
    path = Path(db_path)
    if path.exists():
        raise StorageInitError(
            f"Refusing to create store over existing file: {path}",
            details={"path": str(path)},
        )

    try:
        store = WallpaperStore(path)
    except sqlite3.Error as e:
        raise StorageInitError(f"Cannot create store {path}: {e}", details={"path": str(path)}) from e

    try:
        store.begin_transaction()
        store.create_schema()
        store.commit()
    except sqlite3.Error as e:
        store.rollback()
        store.close()
        path.unlink(missing_ok=True)
        raise StorageInitError(
            f"Schema creation failed for {path}: {e}", details={"path": str(path)}
        ) from e

    logger.debug("Created store schema at {}", path)
    return store


def populate_identities(store: WallpaperStore, displays: Sequence[Display]) -> tuple[int, list[int]]:
    """Insert the first display and its distinct workspaces.

    Returns:
        ``(display_id, space_ids)`` as assigned by SQLite, spaces in
        discovery order.

    Raises:
        NoIdentityData: no display, or the first display has no workspace.
    """
    if not displays:
        raise NoIdentityData("No displays found; nothing to configure")

    display = displays[0]
    if len(displays) > 1:
        logger.warning(
            "Multiple displays not supported: {} displays found, only {} is configured",
            len(displays),
            display.uuid,
        )

    space_uuids = display.distinct_workspace_uuids()
    if not space_uuids:
        raise NoIdentityData(
            f"Display {display.uuid} reports no workspaces; nothing to configure",
            details={"display": display.uuid},
        )

    store.begin_transaction()
    try:
        display_id = store.insert_display(display.uuid)
        space_ids = [store.insert_space(space_uuid) for space_uuid in space_uuids]
        store.commit()
    except sqlite3.Error as e:
        store.rollback()
        raise BuildError(f"Inserting identities failed: {e}", details={"display": display.uuid}) from e
    logger.debug("Inserted display {} and {} spaces", display.uuid, len(space_ids))
    return display_id, space_ids
