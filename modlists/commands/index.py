"""Maintain and query the local package index."""

import click

from modlists.config_runtime import load_runtime_config
from modlists.index import LocalIndex, load_packages_file
from modlists.ui import console, print_success
from modlists.utils.error_handler import handle_exceptions


@click.group("index")
def index():
    """Load or query the local package index used by 'build'.

    The index is a SQLite database of module names built from a CPAN
    02packages.details.txt(.gz) file, as found on any CPAN mirror under
    modules/.
    """
    pass


@index.command("load")
@handle_exceptions
@click.argument("packages_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--db", "db_path", type=click.Path(dir_okay=False), help="Index database path")
def load(packages_file, db_path):
    """Rebuild the index database from a 02packages file."""
    db_path = db_path or load_runtime_config(".")["paths"]["index_db"]
    count = load_packages_file(db_path, packages_file)
    print_success(f"Indexed {count} modules in {db_path}")


@index.command("query")
@handle_exceptions
@click.argument("names", nargs=-1, required=True)
@click.option("--db", "db_path", type=click.Path(dir_okay=False), help="Index database path")
def query(names, db_path):
    """Report which of NAMES are present in the index."""
    db_path = db_path or load_runtime_config(".")["paths"]["index_db"]
    indexed = LocalIndex(db_path).lookup(list(names))

    for name in names:
        if name in indexed:
            console.print(f"  [success]indexed[/success]     {name}", highlight=False)
        else:
            console.print(f"  [warning]not indexed[/warning] {name}", highlight=False)

    print_success(f"{len(indexed)} of {len(set(names))} indexed")
