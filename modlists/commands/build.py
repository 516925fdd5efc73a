"""Generate module-list files from a YAML list file."""

from pathlib import Path

import click

from modlists.builder import ListBuilder
from modlists.config_runtime import load_runtime_config
from modlists.errors import SpecError
from modlists.fetcher import UrllibFetcher
from modlists.index import LocalIndex
from modlists.render import RENDERERS
from modlists.specs import BuildOptions, load_list_file
from modlists.ui import console, print_header, print_success
from modlists.utils.error_handler import handle_exceptions
from modlists.utils.logging import set_console_level


@click.command("build")
@handle_exceptions
@click.argument("list_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--namespace", help="Namespace for generated modules (overrides the list file)")
@click.option("--cache/--no-cache", default=True, help="Reuse fetched pages younger than 30 days")
@click.option("--user-agent", help="HTTP User-Agent for page retrieval")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    help="Distribution root holding devdata/ and lib/",
)
@click.option(
    "--exclude-unindexed/--include-unindexed",
    default=True,
    help="Drop module names missing from the local index",
)
@click.option("--index-db", type=click.Path(dir_okay=False), help="Local index database")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(sorted(RENDERERS)),
    default="perl",
    help="Generated module flavour",
)
@click.option("--verbose", "-v", is_flag=True, help="Log extracted and excluded names")
def build(
    list_file,
    namespace,
    cache,
    user_agent,
    output_dir,
    exclude_unindexed,
    index_db,
    fmt,
    verbose,
):
    """Fetch the pages of every list entry and write one module per entry.

    Each entry's source pages are fetched (or read from devdata/ when the
    cached copy is younger than 30 days), the Perl module names they mention
    are extracted, names unknown to the local index are dropped, and the
    result is written to lib/<namespace>/<name>.pm (or .py with
    --format python).

    \b
    LIST FILE:
      namespace: Acme::CPANLists::Import::Example
      modules:
        - name: Foo
          url: https://example.org/article
          summary: Modules mentioned in the article
          extract_urls: [...]          # optional, defaults to [url]
          extract_opts: {from_text: false}
          note: Free-form text for the documentation
          add_modules: [Extra::Module]

    \b
    EXAMPLES:
      modlists build lists.yml
      modlists build lists.yml --no-cache --include-unindexed
      modlists build lists.yml --format python --namespace mylists.imported

    \b
    EXIT CODES:
      0 = All modules written
      1 = Build aborted (fetch, index, duplicate name or empty list)
      2 = Invalid list file
    """
    if verbose:
        set_console_level("DEBUG")

    cfg = load_runtime_config(".")
    list_data = load_list_file(list_file)

    namespace = namespace or list_data.namespace
    if not namespace:
        raise SpecError("No namespace given (use --namespace or set 'namespace' in the list file)")

    options = BuildOptions(
        cache=cache,
        user_agent=user_agent or cfg["http"]["user_agent"] or None,
        output_dir=output_dir,
        exclude_unindexed=exclude_unindexed,
        format=fmt,
    )

    print_header(f"Building {len(list_data.specs)} module list(s) under {namespace}")

    builder = ListBuilder(
        fetcher=UrllibFetcher(user_agent=options.user_agent, timeout=cfg["http"]["timeout"]),
        index=LocalIndex(index_db or cfg["paths"]["index_db"]),
    )
    result = builder.build(list_data.specs, namespace, options)

    for path in result.written:
        console.print(f"  [path]{Path(path)}[/path]", highlight=False)
    print_success(f"Wrote {len(result.written)} module(s)")
