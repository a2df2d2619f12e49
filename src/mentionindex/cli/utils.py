"""CLI utilities."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from mentionindex.config import MentionIndexConfig, load_config
from mentionindex.core.errors import ConfigError
from mentionindex.index.models import FileEntry


def load_cli_config(
    root: Path, config_file: Path | None = None, **overrides: Any
) -> MentionIndexConfig:
    """Load workspace config with watching disabled.

    A one-shot query never lives long enough to see a change notification.

    Raises:
        click.ClickException: If the config files or environment are invalid
    """
    overrides["watcher"] = {**overrides.get("watcher", {}), "enabled": False}
    try:
        return load_config(root, config_file, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def make_entries_table(entries: list[FileEntry]) -> Table:
    """Create a Rich Table listing entries, one per row."""
    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("icon", width=2)
    table.add_column("name", style="cyan", no_wrap=True)
    table.add_column("path", style="dim")

    for entry in entries:
        name = f"{entry.name}/" if entry.is_folder else entry.name
        table.add_row(entry.icon or "", name, entry.relative_path)

    return table


def print_entries(entries: list[FileEntry], *, empty_message: str) -> None:
    if not entries:
        click.echo(empty_message)
        return
    Console(highlight=False).print(make_entries_table(entries))
