"""musicsync CLI entry point."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from musicsync import __version__
from musicsync.api import run_server
from musicsync.config import MusicSyncConfig, get_config, write_default_config
from musicsync.database import create_store_engine
from musicsync.errors import LibraryScanError, StoreError
from musicsync.logging_config import setup_logging
from musicsync.scanner import resync
from musicsync.services import QueryService
from musicsync.store import LibraryStore, ResyncStats


app = typer.Typer(add_completion=False, help="musicsync music library indexer")
logger = logging.getLogger("musicsync")


class LogLevel(str, Enum):
    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"


LOG_LEVEL_OPTION = typer.Option(
    LogLevel.info, "--log-level", "-l", case_sensitive=False, help="Console log level"
)


def _ensure_config() -> MusicSyncConfig:
    try:
        return get_config()
    except FileNotFoundError:
        typer.echo("[ERROR] config.ini not found. Run: musicsync init --library /path/to/music")
        raise typer.Exit(code=1)


def _open_store(config: MusicSyncConfig) -> LibraryStore:
    engine = create_store_engine(
        config.database_path,
        pool_size=config.database.pool_size,
        pool_timeout=config.database.pool_timeout,
    )
    store = LibraryStore(engine)
    store.init_schema()
    return store


def _run_resync(root: Path, store: LibraryStore) -> ResyncStats:
    try:
        return resync(root, store)
    except (LibraryScanError, StoreError) as exc:
        typer.echo(f"[ERROR] Resync failed: {exc}")
        raise typer.Exit(code=1)


@app.command()
def init(
    library: Path = typer.Option(..., "--library", help="Path to your Artist/Album/Track folder"),
    name: str = typer.Option("My Music Library", "--name", help="Library name"),
) -> None:
    """Initialize config.ini with default settings."""
    config_path = write_default_config(library, name)
    typer.echo(f"[OK] Config created at {config_path}")


@app.command()
def scan(
    path: Optional[Path] = typer.Option(None, "--path", help="Scan this root instead of the configured library"),
    log_level: LogLevel = LOG_LEVEL_OPTION,
) -> None:
    """Wipe the index and rebuild it from the library folder."""
    setup_logging(log_level.value)

    config = _ensure_config()
    store = _open_store(config)
    try:
        stats = _run_resync(path or config.library_path, store)
    finally:
        store.close()

    typer.echo(
        "✓ Resync completed: "
        f"{stats.artists} artists, "
        f"{stats.albums} albums, "
        f"{stats.tracks} tracks "
        f"({stats.untitled} without title)."
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Server host"),
    port: Optional[int] = typer.Option(None, "--port", help="Server port"),
    path: Optional[Path] = typer.Option(None, "--path", help="Scan this root instead of the configured library"),
    no_reload: bool = typer.Option(False, "--no-reload", help="Serve the existing index without rescanning"),
    log_level: LogLevel = LOG_LEVEL_OPTION,
) -> None:
    """Start the HTTP server, rescanning the library first unless told not to."""
    setup_logging(log_level.value)

    config = _ensure_config()
    store = _open_store(config)
    logger.info(f"musicsync {__version__}, index at {config.database_path}")

    if config.scanner.reload_on_start and not no_reload:
        _run_resync(path or config.library_path, store)
    else:
        logger.info("Skipping library scan, serving existing index")

    try:
        run_server(config, store, host=host, port=port, log_level=log_level.value)
    except KeyboardInterrupt:
        pass
    finally:
        store.close()


@app.command()
def stats() -> None:
    """Show library statistics."""
    config = _ensure_config()
    store = _open_store(config)
    try:
        counts = QueryService(store).library_stats()
    finally:
        store.close()

    percent = (counts.albums_with_artwork / counts.albums * 100) if counts.albums else 0

    typer.echo("Library Statistics:")
    typer.echo(f"  Artists: {counts.artists}")
    typer.echo(f"  Albums: {counts.albums}")
    typer.echo(f"  Tracks: {counts.tracks}")
    typer.echo(
        f"  Albums with artwork: {counts.albums_with_artwork} / {counts.albums} "
        f"({percent:.0f}%)"
    )


@app.command()
def reset(
    confirm: bool = typer.Option(False, "--confirm", help="Confirm destructive reset"),
    log_level: LogLevel = LOG_LEVEL_OPTION,
) -> None:
    """Drop and recreate the index tables, then rescan."""
    if not confirm:
        typer.echo("[ERROR] This will drop the whole index. Use --confirm.")
        raise typer.Exit(code=1)

    setup_logging(log_level.value)
    config = _ensure_config()
    store = _open_store(config)
    try:
        store.reset_schema()
        typer.echo("[INFO] Index reset. Rescanning library...")
        _run_resync(config.library_path, store)
    finally:
        store.close()


if __name__ == "__main__":
    app()
