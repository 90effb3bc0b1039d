"""Set a solid color as the wallpaper on every workspace."""

import click

from macpaperd.commands.options import apply, hex_color, store_options
from macpaperd.utils.error_handler import handle_exceptions


@click.command("color")
@click.argument("color", metavar="HEX", callback=hex_color)
@store_options
@handle_exceptions
def set_color(color, store, build_path, from_store, backup, no_restart):
    """Set a solid HEX color ('#RRGGBB' or 'RRGGBB') as the wallpaper.

    \b
    Example:
      macpaperd color '#FF8000'
    """
    apply(
        color,
        store=store,
        build_path=build_path,
        from_store=from_store,
        backup=backup,
        no_restart=no_restart,
    )
