"""Error kinds raised by the indexing engine and the read side."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class MusicSyncError(Exception):
    """Base class for all musicsync errors."""


class LibraryScanError(MusicSyncError):
    """A directory of the library could not be listed. Aborts the whole resync."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class EntityNotFound(MusicSyncError):
    """The requested artist/album/track/artwork does not exist."""

    def __init__(self, kind: str, ident: Union[int, str]):
        super().__init__(f"{kind} {ident} not found")
        self.kind = kind
        self.ident = ident


class StoreError(MusicSyncError):
    """No pooled connection could be acquired, or the database failed the operation."""


class TagReadError(MusicSyncError):
    """A single tag reader could not read a file. Never escapes MetadataExtractor."""
