"""Database engine and connection pool management using SQLModel."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import bindparam, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool
from sqlmodel import SQLModel, create_engine

from .logging_config import get_logger

logger = get_logger(__name__)


def create_store_engine(
    db_path: Path,
    pool_size: int = 5,
    pool_timeout: float = 30.0,
) -> Engine:
    """Create an engine backed by a bounded pool of SQLite connections.

    Checkouts block for at most ``pool_timeout`` seconds once all
    ``pool_size`` connections are in use; there is no overflow.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    # check_same_thread=False: pooled connections are handed to FastAPI worker threads
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _connection_record: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    logger.debug(f"Using {db_path} (pool_size={pool_size}, timeout={pool_timeout}s)")
    return engine


def init_db(engine: Engine) -> None:
    """Create the artists/albums/tracks tables if they do not exist yet."""
    # Import models to ensure they are registered with SQLModel.metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def reset_database(engine: Engine) -> None:
    """Drop and recreate the artists/albums/tracks tables.

    Dropping an AUTOINCREMENT table deletes its sqlite_sequence row, so the
    high-water marks are read first and written back after the recreate.
    """
    from . import models  # noqa: F401

    tables = [table.name for table in SQLModel.metadata.sorted_tables]

    with engine.begin() as conn:
        has_sequence = conn.execute(
            text("SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'sqlite_sequence'")
        ).first()
        sequences = []
        if has_sequence:
            sequences = conn.execute(
                text("SELECT name, seq FROM sqlite_sequence WHERE name IN :names").bindparams(
                    bindparam("names", expanding=True)
                ),
                {"names": tables},
            ).all()

        SQLModel.metadata.drop_all(conn)
        SQLModel.metadata.create_all(conn)

        for name, seq in sequences:
            conn.execute(
                text("INSERT INTO sqlite_sequence (name, seq) VALUES (:name, :seq)"),
                {"name": name, "seq": seq},
            )

    logger.debug(f"Schema dropped and recreated, kept id sequences for {len(sequences)} tables")
