"""
CLI for lscache.

Commands:
    lscache set KEY VALUE - Store a value (JSON, or a plain string)
    lscache get KEY - Print a stored value
    lscache remove KEY - Delete a value
    lscache keys - List keys that carry an expiry
    lscache flush - Delete a bucket's entries
    lscache config - Show current configuration
    lscache version - Print version
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Annotated, Any, Generator, Optional

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lscache import __version__
from lscache.bucket import Bucket
from lscache.config import Settings, clear_settings_cache, get_settings
from lscache.exceptions import LSCacheError
from lscache.logging import setup_logging
from lscache.service import CacheService

app = typer.Typer(
    name="lscache",
    help="Namespaced, expiring key-value cache over a size-bounded store",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

BucketOption = Annotated[
    str,
    typer.Option("--bucket", "-b", help="Bucket path, e.g. 'db/rows' (default: root)"),
]


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except Exception:
        return None


@contextmanager
def _open_bucket(bucket_path: str) -> Generator[Bucket, None, None]:
    """Open the configured store, walk down to ``bucket_path`` and close it after."""
    settings = _get_settings_safe()
    if settings is None:
        error_console.print(
            "[red]Error:[/red] Configuration is invalid. "
            "Run 'lscache config' to see what's wrong."
        )
        raise typer.Exit(1)

    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    service = CacheService.from_settings(settings)
    try:
        if not service.supported():
            error_console.print("[red]Error:[/red] The backing store is unavailable.")
            raise typer.Exit(1)

        bucket = service.root()
        for name in bucket_path.split("/"):
            if name:
                bucket = bucket.create_bucket(name)
        yield bucket
    finally:
        service.close()


def _parse_value(text: str) -> Any:
    """Parse JSON input, falling back to the literal string."""
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return text


def _fail(error: LSCacheError) -> None:
    error_console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(1)


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help="Key within the bucket")],
    value: Annotated[str, typer.Argument(help="JSON value; non-JSON is stored as a string")],
    ttl: Annotated[
        Optional[int],
        typer.Option("--ttl", "-t", help="Time to live in expiry units (minutes by default)"),
    ] = None,
    bucket: BucketOption = "",
) -> None:
    """Store a value in a bucket."""
    with _open_bucket(bucket) as target:
        try:
            target.set(key, _parse_value(value), ttl=ttl)
        except LSCacheError as e:
            _fail(e)
        console.print(f"[green]Stored[/green] {escape(key)} in {escape(target.path)}")


@app.command("get")
def get_value(
    key: Annotated[str, typer.Argument(help="Key within the bucket")],
    bucket: BucketOption = "",
) -> None:
    """Print a stored value as JSON."""
    with _open_bucket(bucket) as target:
        try:
            if not target.exists(key):
                error_console.print(f"[yellow]Not found:[/yellow] {escape(key)}")
                raise typer.Exit(1)
            value = target.get(key)
        except LSCacheError as e:
            _fail(e)
    console.print_json(orjson.dumps(value).decode("utf-8"))


@app.command()
def remove(
    key: Annotated[str, typer.Argument(help="Key within the bucket")],
    bucket: BucketOption = "",
) -> None:
    """Delete a value from a bucket."""
    with _open_bucket(bucket) as target:
        target.remove(key)
    console.print(f"[green]Removed[/green] {escape(key)}")


@app.command()
def keys(bucket: BucketOption = "") -> None:
    """List keys in a bucket that were stored with a ttl."""
    with _open_bucket(bucket) as target:
        for key in target.keys():
            console.print(key, markup=False, highlight=False)


@app.command()
def flush(
    bucket: BucketOption = "",
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Also flush all child buckets"),
    ] = False,
) -> None:
    """Delete every entry in a bucket."""
    with _open_bucket(bucket) as target:
        if recursive:
            target.flush_recursive()
        else:
            target.flush()
        path = target.path
    console.print(f"[green]Flushed[/green] {escape(path)}")


@app.command()
def config() -> None:
    """Show current configuration."""
    console.print()
    console.print("[bold]lscache Configuration[/bold]")
    console.print()

    settings = _get_settings_safe()

    if settings is None:
        error_console.print("[red]Configuration is invalid.[/red]")
        error_console.print()
        error_console.print("Check the LSCACHE_* environment variables or your .env file.")
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.redacted_display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)
    console.print()


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"lscache version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
