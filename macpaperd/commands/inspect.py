"""Inspect a wallpaper store: row counts, schema check, decoded preferences."""

from pathlib import Path

import click
from rich.table import Table

from macpaperd.config_runtime import load_runtime_config
from macpaperd.pipeline.ui import console, print_header, print_success, print_warning
from macpaperd.store.database import WallpaperStore
from macpaperd.store.encoder import describe_key
from macpaperd.store.schema import TABLES
from macpaperd.utils.error_handler import handle_exceptions


def _slot_label(space_id, display_id) -> str:
    space = "any space" if space_id is None else f"space {space_id}"
    display = "any display" if display_id is None else f"display {display_id}"
    return f"{space}, {display}"


@click.command("inspect")
@click.argument("store", required=False, type=click.Path(exists=True, dir_okay=False))
@handle_exceptions
def inspect_store(store):
    """Show what STORE (default: the live store) configures."""
    path = Path(store or load_runtime_config()["paths"]["live_store"])
    if not path.is_file():
        raise click.ClickException(f"Store not found: {path}")

    with WallpaperStore(path) as db:
        print_header(str(path))

        counts = Table(title="Rows")
        counts.add_column("Table", style="key")
        counts.add_column("Rows", justify="right")
        for table in TABLES:
            counts.add_row(table, str(db.count(table)))
        console.print(counts)

        mismatches = db.validate_schema()
        if mismatches:
            for name, errors in mismatches.items():
                for error in errors:
                    print_warning(f"{name}: {error}")
        else:
            print_success("Schema matches")

        for picture_id, space_id, display_id, prefs in db.picture_preferences():
            console.print(f"\n[bold]Picture {picture_id}[/bold] [dim]({_slot_label(space_id, display_id)})[/dim]")
            for key, value in prefs:
                console.print(f"  [key]{describe_key(key):<12}[/key] {value}", highlight=False)
