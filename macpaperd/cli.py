"""macpaperd CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from macpaperd import __version__
from macpaperd.pipeline.ui import console
from macpaperd.utils.logging import set_level


class VerboseGroup(click.Group):
    """Help output grouped by category, built from the registered commands."""

    def format_commands(self, ctx, formatter):
        """Suppress the default listing; format_help prints the categorized one."""
        pass

    COMMAND_CATEGORIES = {
        "WALLPAPER": {
            "title": "WALLPAPER",
            "description": "Rebuild desktoppicture.db and restart the Dock",
            "commands": ["set", "color"],
            "command_meta": {
                "set": {"use_when": "Image file on every workspace"},
                "color": {"use_when": "Solid color on every workspace"},
            },
        },
        "DIAGNOSTICS": {
            "title": "DIAGNOSTICS",
            "description": "Read-only views of displays and stores",
            "commands": ["displays", "inspect"],
            "command_meta": {
                "displays": {"use_when": "Check which display gets configured"},
                "inspect": {"use_when": "Decode what a store configures"},
            },
        },
    }

    def format_help(self, ctx, formatter):
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not name.startswith("_") and not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for category_data in self.COMMAND_CATEGORIES.values():
            console.print(f"\n[bold cyan]{category_data['title']}[/bold cyan]")
            console.print(f"[dim]{category_data['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=12)
            table.add_column("Description", style="white")
            table.add_column("Use", style="dim", width=40)

            for cmd_name in category_data["commands"]:
                if cmd_name not in registered:
                    continue
                cmd = registered[cmd_name]

                first_line = (cmd.help or "").split("\n")[0].strip()
                period_idx = first_line.find(".")
                short_help = first_line[:period_idx] if period_idx > 0 else first_line
                if len(short_help) > 45:
                    short_help = short_help[:45].rsplit(" ", 1)[0] + "..."

                cmd_meta = category_data.get("command_meta", {}).get(cmd_name, {})
                table.add_row(cmd_name, short_help, cmd_meta.get("use_when", ""))

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]macpaperd <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="macpaperd")
@click.help_option("-h", "--help")
@click.option("-v", "--verbose", is_flag=True, help="Log SQL statements and row counts")
def cli(verbose):
    """macpaperd - set the macOS wallpaper without System Settings

    \b
    QUICK START:
      macpaperd set ~/Pictures/beach.jpg   # Image on every workspace
      macpaperd color '#1E1E1E'            # Solid color
      macpaperd displays                   # What will be configured

    \b
    Logging: MACPAPERD_LOG_LEVEL, MACPAPERD_LOG_JSON=1, MACPAPERD_LOG_FILE"""
    if verbose:
        set_level("DEBUG")


from macpaperd.commands.color import set_color
from macpaperd.commands.displays import displays
from macpaperd.commands.inspect import inspect_store
from macpaperd.commands.set import set_image

cli.add_command(set_image)
cli.add_command(set_color)
cli.add_command(displays)
cli.add_command(inspect_store)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
