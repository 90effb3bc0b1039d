"""Database schema definitions for the Dock's desktoppicture.db.

The Dock parses this file itself, so table names, column declarations,
index names and trigger bodies are reproduced exactly as the Dock writes
them. Nothing here may be reordered or "improved".
"""

import sqlite3
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Column:
    """Represents a database column with an optional declared type."""

    name: str
    type: str | None = None

    def to_sql(self) -> str:
        """Generate SQL column definition."""
        if self.type:
            return f"{self.name} {self.type}"
        return self.name


@dataclass(frozen=True)
class TableSchema:
    """Represents a complete table schema."""

    name: str
    columns: tuple[Column, ...]
    indexes: tuple[tuple[str, tuple[str, ...]], ...] = field(default_factory=tuple)

    def column_names(self) -> list[str]:
        """Get list of column names in definition order."""
        return [col.name for col in self.columns]

    def create_table_sql(self) -> str:
        """Generate CREATE TABLE statement.

        No ``IF NOT EXISTS``: a store is always created from nothing.
        """
        col_defs = ", ".join(col.to_sql() for col in self.columns)
        return f"CREATE TABLE {self.name} ({col_defs})"

    def create_indexes_sql(self) -> list[str]:
        """Generate CREATE INDEX statements."""
        return [
            f"CREATE INDEX {idx_name} ON {self.name} ({', '.join(idx_cols)})"
            for idx_name, idx_cols in self.indexes
        ]

    def validate_against_db(self, cursor: sqlite3.Cursor) -> tuple[bool, list[str]]:
        """Validate that actual database table matches this schema."""
        errors = []

        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name=?", (self.name,))
        if not cursor.fetchone():
            errors.append(f"Table {self.name} does not exist")
            return False, errors

        cursor.execute(f"PRAGMA table_info({self.name})")
        actual_cols = [(row[1], row[2]) for row in cursor.fetchall()]
        expected_cols = [(col.name, col.type or "") for col in self.columns]

        actual_names = [name for name, _ in actual_cols]
        if actual_names != self.column_names():
            errors.append(
                f"Columns of {self.name} are {actual_names}, expected {self.column_names()}"
            )
        else:
            for (name, actual_type), (_, expected_type) in zip(actual_cols, expected_cols, strict=True):
                if actual_type.upper() != expected_type.upper():
                    errors.append(
                        f"Column {self.name}.{name} type mismatch: "
                        f"expected {expected_type or '<none>'}, got {actual_type or '<none>'}"
                    )

        for idx_name, _ in self.indexes:
            cursor.execute(
                "SELECT tbl_name FROM sqlite_master WHERE type='index' AND name=?", (idx_name,)
            )
            row = cursor.fetchone()
            if not row:
                errors.append(f"Index {idx_name} missing on table {self.name}")
            elif row[0] != self.name:
                errors.append(f"Index {idx_name} is on {row[0]}, expected {self.name}")

        return len(errors) == 0, errors


@dataclass(frozen=True)
class TriggerSchema:
    """An AFTER DELETE trigger keeping the tables free of orphans."""

    name: str
    table: str
    statements: tuple[str, ...]

    def create_trigger_sql(self) -> str:
        """Generate CREATE TRIGGER statement."""
        body = "; ".join(self.statements)
        return f"CREATE TRIGGER {self.name} AFTER DELETE ON {self.table} BEGIN {body}; END"

    def validate_against_db(self, cursor: sqlite3.Cursor) -> tuple[bool, list[str]]:
        """Validate that the trigger exists on the expected table."""
        cursor.execute(
            "SELECT tbl_name FROM sqlite_master WHERE type='trigger' AND name=?", (self.name,)
        )
        row = cursor.fetchone()
        if not row:
            return False, [f"Trigger {self.name} does not exist"]
        if row[0] != self.table:
            return False, [f"Trigger {self.name} is on {row[0]}, expected {self.table}"]
        return True, []


# ============================================================================
# TABLES - creation order matters, the Dock's own file lists them this way
# ============================================================================

DATA = TableSchema(
    name="data",
    columns=(Column("value"),),
    indexes=(("data_index", ("value",)),),
)

DISPLAYS = TableSchema(
    name="displays",
    columns=(Column("display_uuid"),),
    indexes=(("displays_index", ("display_uuid",)),),
)

PICTURES = TableSchema(
    name="pictures",
    columns=(
        Column("space_id", "INTEGER"),
        Column("display_id", "INTEGER"),
    ),
    indexes=(("pictures_index", ("space_id", "display_id")),),
)

PREFERENCES = TableSchema(
    name="preferences",
    columns=(
        Column("key", "INTEGER"),
        Column("data_id", "INTEGER"),
        Column("picture_id", "INTEGER"),
    ),
    indexes=(("preferences_index", ("picture_id", "data_id")),),
)

# Reserved by the Dock for picture cycling; created but never written.
PREFS = TableSchema(
    name="prefs",
    columns=(
        Column("key", "INTEGER"),
        Column("data"),
    ),
    indexes=(("prefs_index", ("key",)),),
)

SPACES = TableSchema(
    name="spaces",
    columns=(Column("space_uuid", "VARCHAR"),),
    indexes=(("spaces_index", ("space_uuid",)),),
)

TABLES: dict[str, TableSchema] = {
    schema.name: schema for schema in (DATA, DISPLAYS, PICTURES, PREFERENCES, PREFS, SPACES)
}


# ============================================================================
# TRIGGERS - the only consistency mechanism the store has
# ============================================================================

TRIGGERS: dict[str, TriggerSchema] = {
    trigger.name: trigger
    for trigger in (
        TriggerSchema(
            name="display_deleted",
            table="displays",
            statements=("DELETE FROM pictures WHERE display_id=OLD.ROWID",),
        ),
        TriggerSchema(
            name="picture_deleted",
            table="pictures",
            statements=(
                "DELETE FROM preferences WHERE picture_id=OLD.ROWID",
                "DELETE FROM displays WHERE ROWID=OLD.display_id AND NOT EXISTS "
                "(SELECT NULL FROM pictures WHERE display_id=OLD.display_id)",
                "DELETE FROM spaces WHERE ROWID=OLD.space_id AND NOT EXISTS "
                "(SELECT NULL FROM pictures WHERE space_id=OLD.space_id)",
            ),
        ),
        TriggerSchema(
            name="preferences_deleted",
            table="preferences",
            statements=(
                "DELETE FROM data WHERE ROWID=OLD.data_id AND NOT EXISTS "
                "(SELECT NULL FROM preferences WHERE data_id=OLD.data_id)",
            ),
        ),
        TriggerSchema(
            name="space_deleted",
            table="spaces",
            statements=("DELETE FROM pictures WHERE space_id=OLD.ROWID",),
        ),
    )
}


def schema_statements() -> list[str]:
    """Every DDL statement for a fresh store: tables, then indices, then triggers."""
    stmts = [schema.create_table_sql() for schema in TABLES.values()]
    for schema in TABLES.values():
        stmts.extend(schema.create_indexes_sql())
    stmts.extend(trigger.create_trigger_sql() for trigger in TRIGGERS.values())
    return stmts


def validate_all_tables(cursor: sqlite3.Cursor) -> dict[str, list[str]]:
    """Validate all table and trigger definitions against actual database."""
    results = {}
    for name, schema in (*TABLES.items(), *TRIGGERS.items()):
        is_valid, errors = schema.validate_against_db(cursor)
        if not is_valid:
            results[name] = errors
    return results
