"""mentionindex search command - ranked file and folder search."""

import asyncio
from pathlib import Path

import click

from mentionindex.cli.utils import echo_json, load_cli_config, print_entries
from mentionindex.config.constants import SEARCH_MAX_RESULTS
from mentionindex.config.models import MentionIndexConfig
from mentionindex.index.models import FileEntry
from mentionindex.index.ops import FileIndexEngine


async def _search(
    root: Path, config: MentionIndexConfig, query: str, scope: str
) -> list[FileEntry]:
    async with FileIndexEngine.for_root(root, config=config) as engine:
        return await engine.search(query, scope)


@click.command()
@click.argument("query")
@click.option("--scope", "-s", default="", help="Restrict results to this folder")
@click.option(
    "--root",
    "-r",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Workspace root (default: current directory)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Extra config file layered over the workspace config",
)
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(1, SEARCH_MAX_RESULTS),
    default=None,
    help=f"Maximum results (1-{SEARCH_MAX_RESULTS})",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search_command(
    query: str,
    scope: str,
    root: Path,
    config_file: Path | None,
    limit: int | None,
    as_json: bool,
) -> None:
    """Search workspace files and folders.

    QUERY is matched case-insensitively against relative paths. An empty
    QUERY ("") lists the direct children of --scope instead.
    """
    root = root.resolve()
    overrides = {"search": {"max_results": limit}} if limit is not None else {}
    config = load_cli_config(root, config_file, **overrides)

    results = asyncio.run(_search(root, config, query, scope))

    if as_json:
        echo_json([entry.to_dict() for entry in results])
    else:
        print_entries(results, empty_message="No matches.")
