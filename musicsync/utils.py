"""Utility functions for musicsync."""

from __future__ import annotations

import os
from pathlib import Path


def lossy_text(value: str) -> str:
    """Return value with undecodable filesystem bytes replaced by U+FFFD.

    Names that are not valid UTF-8 come back from os.listdir with lone
    surrogates, which sqlite and JSON both refuse.
    """
    return os.fsencode(value).decode("utf-8", errors="replace")


def display_name(path: Path) -> str:
    """Base name of path, safe to store and show."""
    return lossy_text(path.name)


def short_path(path: Path) -> str:
    """Return abbreviated path showing only parent folder + filename.
    
    Example: /very/long/path/to/Album/01 - Song.flac -> Album/01 - Song.flac
    """
    return lossy_text(f"{path.parent.name}/{path.name}")


def path_to_bytes(path: Path) -> bytes:
    """Lossless database form of a filesystem path."""
    return os.fsencode(path)


def path_from_bytes(raw: bytes) -> Path:
    return Path(os.fsdecode(raw))
