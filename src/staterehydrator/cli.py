"""
CLI interface for inspecting persisted state.

Both commands read from a file storage directory and never write to it.
"""

import asyncio
import functools
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import RehydrateConfig, RehydratorSettings
from .constants import DEFAULT_COMMON_KEYS_PREFIX, DEFAULT_DYN_PREFIX, DEFAULT_STORAGE_NAMESPACE
from .error import RehydrationError
from .keys import KeyNamespace
from .rehydrator import get_stored_state
from .storage import FileStorage


console = Console()


def configure_logging(level: str) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def storage_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that opens a storage directory."""

    @click.option("--storage-dir", "-d", type=click.Path(path_type=Path), help="Storage root directory")
    @click.option("--namespace", "-n", default=DEFAULT_STORAGE_NAMESPACE, show_default=True, help="Storage namespace")
    @click.option("--key-prefix", "-p", default=None, help="Key prefix of persisted state")
    @click.option("--common-keys-prefix", default=DEFAULT_COMMON_KEYS_PREFIX, show_default=True)
    @click.option("--dyn-prefix", default=DEFAULT_DYN_PREFIX, show_default=True)
    @click.option("--common-key", "-c", multiple=True, help="Logical key stored as a common key")
    @click.option("--verbose", "-v", is_flag=True, help="Log per-key diagnostics")
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper


def open_storage(settings: RehydratorSettings, storage_dir: Optional[Path], namespace: str) -> FileStorage:
    return FileStorage((storage_dir or settings.storage_dir) / namespace)


def render_value(value: Any) -> Text:
    if value is None:
        return Text("null", style="red")
    return Text(json.dumps(value, default=str, sort_keys=True))


@click.group()
@click.version_option(version=__version__, prog_name="state-rehydrator")
def main() -> None:
    """
    StateRehydrator - inspect application state persisted in a key-value storage.
    """


@main.command()
@storage_options
@click.option("--whitelist", "-w", multiple=True, help="Only restore these keys")
@click.option("--blacklist", "-b", multiple=True, help="Never restore these keys")
@click.option("--raw", is_flag=True, help="Stored values are not JSON serialized")
@click.option("--json", "as_json", is_flag=True, help="Print the restored state as JSON")
def show(
    storage_dir: Optional[Path],
    namespace: str,
    key_prefix: Optional[str],
    common_keys_prefix: str,
    dyn_prefix: str,
    common_key: Tuple[str, ...],
    verbose: bool,
    whitelist: Tuple[str, ...],
    blacklist: Tuple[str, ...],
    raw: bool,
    as_json: bool,
) -> None:
    """Rehydrate the persisted state and print it."""
    settings = RehydratorSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    config = RehydrateConfig(
        storage=open_storage(settings, storage_dir, namespace),
        serialize=not raw,
        whitelist=whitelist or None,
        blacklist=blacklist,
        key_prefix=settings.key_prefix if key_prefix is None else key_prefix,
        common_keys=common_key,
        common_keys_prefix=common_keys_prefix,
        dyn_prefix=dyn_prefix,
    )

    try:
        state = asyncio.run(get_stored_state(config))
    except RehydrationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(state, default=str, indent=2, sort_keys=True))
        return

    if not state:
        console.print("[yellow]No persisted state found[/yellow]")
        return

    table = Table(title="Restored state")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key in sorted(state):
        table.add_row(Text(key), render_value(state[key]))
    console.print(table)


@main.command()
@storage_options
def keys(
    storage_dir: Optional[Path],
    namespace: str,
    key_prefix: Optional[str],
    common_keys_prefix: str,
    dyn_prefix: str,
    common_key: Tuple[str, ...],
    verbose: bool,
) -> None:
    """List the persisted state keys held in a storage directory."""
    settings = RehydratorSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    storage = open_storage(settings, storage_dir, namespace)
    key_namespace = KeyNamespace(
        key_prefix=settings.key_prefix if key_prefix is None else key_prefix,
        common_keys_prefix=common_keys_prefix,
        dyn_prefix=dyn_prefix,
        common_keys=frozenset(common_key),
    )

    try:
        all_keys = asyncio.run(storage.get_all_keys())
    except RehydrationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    table = Table(title=f"Persisted keys in {escape(str(storage.directory))}")
    table.add_column("Key", style="cyan")
    table.add_column("Namespace")
    table.add_column("Storage key", style="dim")

    found = 0
    for storage_key in all_keys:
        sub_namespace = key_namespace.sub_namespace(storage_key)
        if sub_namespace is None:
            continue
        found += 1
        table.add_row(
            Text(key_namespace.extract_logical_key(storage_key) or ""),
            sub_namespace,
            Text(storage_key),
        )

    if not found:
        console.print("[yellow]No persisted state found[/yellow]")
        return
    console.print(table)


if __name__ == "__main__":
    main()
