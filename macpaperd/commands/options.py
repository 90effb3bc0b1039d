"""Options shared by the commands that replace the live store."""

import click

from macpaperd.config_runtime import load_runtime_config
from macpaperd.engine import set_wallpaper
from macpaperd.pipeline.ui import console, print_success
from macpaperd.providers import DisplayProvider
from macpaperd.providers.skylight import SkyLightProvider
from macpaperd.providers.snapshot import StoreSnapshotProvider
from macpaperd.store.encoder import WallpaperSpec, parse_hex_color
from macpaperd.store.exceptions import EncodingError


def hex_color(ctx, param, value):
    """Click callback: '#RRGGBB' -> ColorSpec."""
    if value is None:
        return None
    try:
        return parse_hex_color(value)
    except EncodingError as e:
        raise click.BadParameter(e.message, ctx=ctx, param=param) from e


def provider_option(func):
    return click.option(
        "--from-store",
        "from_store",
        is_flag=False,
        flag_value="",
        default=None,
        metavar="[STORE]",
        help="Read display and Space identities from a store instead of the window server "
        "(the live store when given without a value)",
    )(func)


def store_options(func):
    """--store, --build-path, --from-store, --backup/--no-backup, --no-restart."""
    options = [
        click.option("--store", "store", type=click.Path(dir_okay=False), help="Live store path"),
        click.option("--build-path", type=click.Path(dir_okay=False), help="Scratch path for the new store"),
        provider_option,
        click.option(
            "--backup/--no-backup", default=False, help="Copy the live store to the backup directory first"
        ),
        click.option("--no-restart", is_flag=True, help="Do not restart the Dock after the swap"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_provider(from_store: str | None, live_store: str) -> DisplayProvider:
    if from_store is None:
        return SkyLightProvider()
    return StoreSnapshotProvider(from_store or live_store)


def apply(
    spec: WallpaperSpec,
    *,
    store: str | None,
    build_path: str | None,
    from_store: str | None,
    backup: bool,
    no_restart: bool,
) -> None:
    """Run the engine with configuration defaults filled in and report the result."""
    cfg = load_runtime_config()
    live_store = store or cfg["paths"]["live_store"]
    report = set_wallpaper(
        spec,
        resolve_provider(from_store, live_store),
        live_store=live_store,
        build_store=build_path or cfg["paths"]["build_store"],
        backup_dir=cfg["paths"]["backup_dir"] if backup else None,
        restart=not no_restart,
        killall=cfg["process"]["killall"],
        consumer=cfg["process"]["consumer"],
        restart_timeout=cfg["timeouts"]["restart"],
    )
    print_success(f"Wallpaper set on {report.workspaces} workspace(s)")
    console.print(
        f"[dim]{report.pictures} pictures, {report.preferences} preferences, "
        f"{report.data_rows} data rows -> [/dim][path]{live_store}[/path]",
        highlight=False,
    )
