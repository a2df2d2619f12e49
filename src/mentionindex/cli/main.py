"""mentionindex CLI - drive the file index against a directory."""

import click

from mentionindex.cli.browse import browse_command
from mentionindex.cli.search import search_command
from mentionindex.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="mentionindex")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """mentionindex - workspace file search for @ mentions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(search_command, name="search")
cli.add_command(browse_command, name="browse")


if __name__ == "__main__":
    cli()
