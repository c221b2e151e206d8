"""Read models handed to callers of the query layer.

Filesystem paths ride along for internal use (streaming audio and artwork)
but are excluded from serialized output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ArtistRead(BaseModel):
    id: int
    name: str


class AlbumRead(BaseModel):
    id: int
    title: str
    artist_id: int
    artist: ArtistRead
    artwork_path: Optional[Path] = Field(default=None, exclude=True)


class TrackRead(BaseModel):
    id: int
    title: Optional[str] = None
    filename: str
    file_path: Optional[Path] = Field(default=None, exclude=True)


class FullAlbum(BaseModel):
    """An album paired with all of its tracks."""

    album: AlbumRead
    tracks: List[TrackRead]


class LibraryStats(BaseModel):
    artists: int = 0
    albums: int = 0
    tracks: int = 0
    albums_with_artwork: int = 0


class ListResponse(BaseModel, Generic[T]):
    """Uniform `{values: [...]}` wrapper for list results."""

    values: List[T]
