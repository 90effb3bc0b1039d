"""Set an image as the wallpaper on every workspace."""

import click

from macpaperd.commands.options import apply, hex_color, store_options
from macpaperd.store.encoder import DynamicMode, ImageSpec, Orientation
from macpaperd.utils.error_handler import handle_exceptions


@click.command("set")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option(
    "--orientation",
    type=click.Choice([o.value for o in Orientation]),
    default=Orientation.FULL.value,
    show_default=True,
    help="How the image is fitted to the screen",
)
@click.option(
    "--dynamic",
    type=click.Choice([m.value for m in DynamicMode]),
    default=DynamicMode.NONE.value,
    show_default=True,
    help="Appearance variant for dynamic .heic wallpapers",
)
@click.option(
    "--background",
    callback=hex_color,
    metavar="HEX",
    help="Color around a non-full image, e.g. '#1E1E1E'",
)
@store_options
@handle_exceptions
def set_image(path, orientation, dynamic, background, store, build_path, from_store, backup, no_restart):
    """Set PATH (.png, .jpg, .tiff or .heic) as the wallpaper.

    \b
    Examples:
      macpaperd set ~/Pictures/beach.jpg
      macpaperd set ~/Pictures/logo.png --orientation center --background '#202020'
      macpaperd set ~/Pictures/Sonoma.heic --dynamic dark
    """
    spec = ImageSpec(
        path=path,
        orientation=Orientation(orientation),
        dynamic_mode=DynamicMode(dynamic),
        flat_color=background,
    )
    apply(
        spec,
        store=store,
        build_path=build_path,
        from_store=from_store,
        backup=backup,
        no_restart=no_restart,
    )
