"""List the displays and workspaces a wallpaper would be applied to."""

import click
from rich.table import Table

from macpaperd.commands.options import provider_option, resolve_provider
from macpaperd.config_runtime import load_runtime_config
from macpaperd.pipeline.ui import console, print_warning
from macpaperd.utils.error_handler import handle_exceptions


@click.command("displays")
@provider_option
@handle_exceptions
def displays(from_store):
    """List displays and their workspaces (Spaces).

    Only the first display is configured by `set` and `color`.
    """
    cfg = load_runtime_config()
    found = resolve_provider(from_store, cfg["paths"]["live_store"]).list_displays()
    if not found:
        print_warning("No displays found")
        return

    table = Table(title="Displays")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Display", style="path")
    table.add_column("Workspace")
    table.add_column("Fullscreen", justify="center")

    for index, display in enumerate(found, 1):
        label = f"{display.uuid} (configured)" if index == 1 else display.uuid
        if not display.workspaces:
            table.add_row(str(index), label, "[dim]none[/dim]", "")
            continue
        for position, workspace in enumerate(display.workspaces):
            table.add_row(
                str(index) if position == 0 else "",
                label if position == 0 else "",
                workspace.uuid,
                "yes" if workspace.is_fullscreen else "",
            )

    console.print(table)
