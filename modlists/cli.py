"""modlists CLI - main entry point and command registration hub."""
# ruff: noqa: E402 - commands imported after cli group definition

import click
from rich.table import Table

from modlists import __version__
from modlists.ui import console


class VerboseGroup(click.Group):
    """Help output grouped by category, rendered with Rich."""

    COMMAND_CATEGORIES = {
        "GENERATE": {
            "title": "GENERATE",
            "description": "Fetch pages and write module-list files",
            "commands": ["build"],
        },
        "INDEX": {
            "title": "LOCAL INDEX",
            "description": "Maintain the local package index used for filtering",
            "commands": ["index"],
        },
    }

    def format_commands(self, ctx, formatter):
        """Suppress default command listing (categorized format in format_help)."""
        pass

    def format_help(self, ctx, formatter):
        super().format_help(ctx, formatter)

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for category in self.COMMAND_CATEGORIES.values():
            console.print(f"\n[bold cyan]{category['title']}[/bold cyan]")
            console.print(f"[dim]{category['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=18)
            table.add_column("Description", style="white")

            for cmd_name in category["commands"]:
                cmd = self.commands.get(cmd_name)
                if cmd is None or getattr(cmd, "hidden", False):
                    continue
                short_help = (cmd.help or "").split("\n")[0].strip().rstrip(".")
                table.add_row(cmd_name, short_help)

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]modlists <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="modlists")
@click.help_option("-h", "--help")
def cli():
    """modlists - Generate module-list files from the package names web pages mention

    \b
    QUICK START:
      modlists index load 02packages.details.txt.gz
      modlists build lists.yml --namespace Acme::CPANLists::Import::Example"""
    pass


from modlists.commands.build import build
from modlists.commands.index import index

cli.add_command(build)
cli.add_command(index)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
