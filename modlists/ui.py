"""Central UI handler for modlists.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from modlists.ui import console, print_header, print_success

    console.print("[success]All lists written[/success]")
"""

import sys

from rich.console import Console
from rich.theme import Theme

MODLISTS_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

console = Console(
    theme=MODLISTS_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_success(msg: str) -> None:
    console.print(f"[success]OK:[/success] {msg}")
