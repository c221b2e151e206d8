"""Config management for musicsync.

Reads `config.ini` from DATA_DIR (beside main.py unless overridden).
When running as PyInstaller onefile, PROJECT_ROOT is the directory containing the executable.
"""

from __future__ import annotations

import configparser
import dataclasses
import os
import pathlib
import sys
from typing import Optional

from .logging_config import get_logger

logger = get_logger(__name__)

def _get_project_root() -> pathlib.Path:
    if getattr(sys, "frozen", False):
        return pathlib.Path(sys.executable).resolve().parent
    return pathlib.Path(__file__).resolve().parents[1]


PROJECT_ROOT = _get_project_root()

# DATA_DIR holds all persistent state (config.ini, musicsync.db, musicsync.log).
# Set via env var for Docker; defaults to PROJECT_ROOT for standalone use.
DATA_DIR = pathlib.Path(os.environ.get("DATA_DIR", str(PROJECT_ROOT)))
DEFAULT_CONFIG_PATH = DATA_DIR / "config.ini"
DEFAULT_DB_NAME = "musicsync.db"


@dataclasses.dataclass
class LibraryConfig:
    path: pathlib.Path
    name: str = "My Music Library"


@dataclasses.dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3030


@dataclasses.dataclass
class DatabaseConfig:
    """Where the library index lives and how many connections may read it at once."""

    path: pathlib.Path = dataclasses.field(
        default_factory=lambda: DATA_DIR / DEFAULT_DB_NAME
    )
    pool_size: int = 5
    # Seconds a caller waits for a free pooled connection before giving up.
    pool_timeout: float = 30.0


@dataclasses.dataclass
class ScannerConfig:
    reload_on_start: bool = True


@dataclasses.dataclass
class MusicSyncConfig:
    library: LibraryConfig
    server: ServerConfig
    database: DatabaseConfig
    scanner: ScannerConfig

    @property
    def library_path(self) -> pathlib.Path:
        return self.library.path

    @property
    def server_host(self) -> str:
        return self.server.host

    @property
    def server_port(self) -> int:
        return self.server.port

    @property
    def database_path(self) -> pathlib.Path:
        return self.database.path


def _parse_bool(value: str, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config(config_path: Optional[pathlib.Path] = None) -> MusicSyncConfig:
    """Load configuration from config.ini.

    Defaults to `config.ini` in DATA_DIR.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    parser = configparser.ConfigParser()
    parser.read(path)

    lib_path = pathlib.Path(
        parser.get("library", "path", fallback="/path/to/music")
    ).expanduser()
    lib_name = parser.get("library", "name", fallback="My Music Library")

    server = ServerConfig(
        host=parser.get("server", "host", fallback="0.0.0.0"),
        port=parser.getint("server", "port", fallback=3030),
    )

    database = DatabaseConfig(
        path=pathlib.Path(
            parser.get("database", "path", fallback=str(DATA_DIR / DEFAULT_DB_NAME))
        ).expanduser(),
        pool_size=parser.getint("database", "pool_size", fallback=5),
        pool_timeout=parser.getfloat("database", "pool_timeout", fallback=30.0),
    )
    if database.pool_size < 1:
        raise ValueError(f"database.pool_size must be at least 1, got {database.pool_size}")

    scanner = ScannerConfig(
        reload_on_start=_parse_bool(
            parser.get("scanner", "reload_on_start", fallback="true"), True
        ),
    )

    return MusicSyncConfig(
        library=LibraryConfig(path=lib_path, name=lib_name),
        server=server,
        database=database,
        scanner=scanner,
    )


_cached_config: Optional[MusicSyncConfig] = None


def get_config() -> MusicSyncConfig:
    """Return the cached config singleton. Loads from disk on first call."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reset_config_cache() -> None:
    """Clear the cached config (useful for tests)."""
    global _cached_config
    _cached_config = None


def write_default_config(
    library_path: pathlib.Path,
    library_name: str = "My Music Library",
    config_path: Optional[pathlib.Path] = None,
) -> pathlib.Path:
    """Write a config.ini pointing at `library_path`, with defaults for everything else."""
    path = config_path or DEFAULT_CONFIG_PATH

    parser = configparser.ConfigParser()
    parser["library"] = {
        "path": str(library_path.expanduser()),
        "name": library_name,
    }
    parser["server"] = {
        "host": "0.0.0.0",
        "port": "3030",
    }
    parser["database"] = {
        "path": str(DATA_DIR / DEFAULT_DB_NAME),
        "pool_size": "5",
        "pool_timeout": "30",
    }
    parser["scanner"] = {
        "reload_on_start": "true",
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        parser.write(handle)

    logger.debug(f"Wrote config to {path}")
    return path
