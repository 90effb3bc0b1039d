"""Central UI handler for macpaperd.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from macpaperd.pipeline.ui import console, print_header, print_success

    console.print("[success]Wallpaper set[/success]")
    print_header("STORE")
"""

import sys

from rich.console import Console
from rich.theme import Theme

MACPAPERD_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "key": "bold blue",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=MACPAPERD_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_warning(msg: str) -> None:
    console.print(f"[warning]WARNING:[/warning] {msg}")


def print_success(msg: str) -> None:
    console.print(f"[success]OK:[/success] {msg}")
