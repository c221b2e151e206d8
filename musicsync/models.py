"""SQLModel tables for the musicsync library index.

AUTOINCREMENT keeps ids monotonic across resyncs: wiped rows never hand
their ids to the next generation.

Filesystem paths are stored as raw bytes (os.fsencode) so names that are
not valid UTF-8 survive the round trip.
"""

from typing import Optional
from sqlmodel import Field, SQLModel


class Artist(SQLModel, table=True):
    __tablename__ = "artists"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str


class Album(SQLModel, table=True):
    __tablename__ = "albums"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    artist_id: int = Field(foreign_key="artists.id", index=True)
    artwork_path: Optional[bytes] = None


class Track(SQLModel, table=True):
    __tablename__ = "tracks"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    title: Optional[str] = None  # None when no tag reader found one
    album_id: int = Field(foreign_key="albums.id", index=True)
    file_path: bytes
