"""mentionindex browse command - list one folder."""

import asyncio
from pathlib import Path

import click

from mentionindex.cli.utils import echo_json, load_cli_config, print_entries
from mentionindex.config.models import MentionIndexConfig
from mentionindex.index.models import FolderContent
from mentionindex.index.ops import FileIndexEngine


async def _browse(root: Path, config: MentionIndexConfig, folder: str) -> FolderContent:
    async with FileIndexEngine.for_root(root, config=config) as engine:
        return await engine.get_folder_contents(folder)


@click.command()
@click.argument("scope", default="", required=False)
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
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def browse_command(scope: str, root: Path, config_file: Path | None, as_json: bool) -> None:
    """List the folders and files directly inside SCOPE.

    SCOPE is relative to the workspace root (default: the root itself).
    """
    root = root.resolve()
    config = load_cli_config(root, config_file)

    content = asyncio.run(_browse(root, config, scope))

    if as_json:
        echo_json(
            {
                "path": content.path,
                "parentPath": content.parent_path,
                "items": [entry.to_dict() for entry in content.items],
            }
        )
        return

    click.echo(content.path)
    print_entries(content.items, empty_message="(empty)")
