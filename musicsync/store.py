"""Data access layer for musicsync.

LibraryStore owns the engine (and with it the bounded connection pool).
Every public method acquires a pooled connection for its own duration only.
The write side is a single wipe-and-rebuild transaction; everything else is
read-only.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import Session, col, func, select

from .database import init_db, reset_database
from .errors import EntityNotFound, StoreError
from .logging_config import get_logger
from .models import Album, Artist, Track
from .schemas import AlbumRead, ArtistRead, FullAlbum, LibraryStats, TrackRead
from .utils import display_name, path_from_bytes, path_to_bytes

if TYPE_CHECKING:
    from .scanner import ArtistCandidate

logger = get_logger(__name__)


@dataclass
class ResyncStats:
    artists: int = 0
    albums: int = 0
    tracks: int = 0
    artworks: int = 0
    untitled: int = 0


def _artist_read(artist: Artist) -> ArtistRead:
    return ArtistRead(id=artist.id, name=artist.name)


def _album_read(album: Album, artist: Artist) -> AlbumRead:
    return AlbumRead(
        id=album.id,
        title=album.title,
        artist_id=album.artist_id,
        artist=_artist_read(artist),
        artwork_path=path_from_bytes(album.artwork_path) if album.artwork_path else None,
    )


def _track_read(track: Track) -> TrackRead:
    path = path_from_bytes(track.file_path)
    return TrackRead(id=track.id, title=track.title, filename=display_name(path), file_path=path)


class LibraryStore:
    def __init__(self, engine: Engine):
        self.engine = engine
        # One resync at a time per store
        self._resync_lock = threading.Lock()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Scoped acquisition of one pooled connection, released on every exit path."""
        try:
            with Session(self.engine) as session:
                yield session
        except PoolTimeoutError as exc:
            raise StoreError("Timed out waiting for a pooled database connection") from exc
        except SQLAlchemyError as exc:
            raise StoreError(f"Database error: {exc}") from exc

    def init_schema(self) -> None:
        try:
            init_db(self.engine)
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not create schema: {exc}") from exc

    def reset_schema(self) -> None:
        """Drop and recreate the artists/albums/tracks relations."""
        with self._resync_lock:
            try:
                reset_database(self.engine)
            except SQLAlchemyError as exc:
                raise StoreError(f"Could not reset schema: {exc}") from exc

    def close(self) -> None:
        self.engine.dispose()

    # --- Write side ---

    def rebuild(self, artists: Sequence[ArtistCandidate]) -> ResyncStats:
        """Wipe the index and insert the given candidate tree in one transaction.

        Ids are obtained by flushing each level before the next one references
        it, so nothing becomes visible to readers until the final commit. Any
        failure rolls back to the previous snapshot.
        """
        with self._resync_lock:
            self.init_schema()
            stats = ResyncStats()

            with self.session() as session, session.begin():
                session.exec(delete(Track))
                session.exec(delete(Album))
                session.exec(delete(Artist))
                logger.debug("Wiped previous index")

                artist_rows = [(Artist(name=c.name), c) for c in artists]
                session.add_all([row for row, _ in artist_rows])
                session.flush()

                album_rows = []
                for artist, candidate in artist_rows:
                    for album_c in candidate.albums:
                        album = Album(
                            title=album_c.title,
                            artist_id=artist.id,
                            artwork_path=path_to_bytes(album_c.artwork_path) if album_c.artwork_path else None,
                        )
                        album_rows.append((album, album_c))
                session.add_all([row for row, _ in album_rows])
                session.flush()

                for album, candidate in album_rows:
                    for track_c in candidate.tracks:
                        session.add(
                            Track(
                                title=track_c.title,
                                album_id=album.id,
                                file_path=path_to_bytes(track_c.path),
                            )
                        )
                        stats.tracks += 1
                        if track_c.title is None:
                            stats.untitled += 1
                    if candidate.artwork_path is not None:
                        stats.artworks += 1
                session.flush()

                stats.artists = len(artist_rows)
                stats.albums = len(album_rows)

            return stats

    # --- Read side ---

    def list_artists(self) -> List[ArtistRead]:
        with self.session() as session:
            rows = session.exec(select(Artist).order_by(Artist.id)).all()
            return [_artist_read(artist) for artist in rows]

    def list_albums(self, artist_id: Optional[int] = None) -> List[AlbumRead]:
        statement = select(Album, Artist).join(Artist, Album.artist_id == Artist.id)
        if artist_id is not None:
            statement = statement.where(Album.artist_id == artist_id)
        statement = statement.order_by(Album.id)

        with self.session() as session:
            rows = session.exec(statement).all()
            return [_album_read(album, artist) for album, artist in rows]

    def list_album_tracks(self, album_id: int) -> List[TrackRead]:
        """Tracks of an album; empty (not an error) for an unknown album."""
        statement = select(Track).where(Track.album_id == album_id).order_by(Track.id)
        with self.session() as session:
            rows = session.exec(statement).all()
            return [_track_read(track) for track in rows]

    def find_album_artwork(self, album_id: int) -> Path:
        with self.session() as session:
            album = session.get(Album, album_id)
            if album is None or not album.artwork_path:
                raise EntityNotFound("Artwork for album", album_id)
            return path_from_bytes(album.artwork_path)

    def list_artist_full_albums(self, artist_id: int) -> List[FullAlbum]:
        """Every album of the artist with all of its tracks, read in one statement."""
        statement = (
            select(Album, Artist, Track)
            .join(Artist, Album.artist_id == Artist.id)
            .outerjoin(Track, Track.album_id == Album.id)
            .where(Album.artist_id == artist_id)
            .order_by(Album.id, Track.id)
        )

        with self.session() as session:
            rows = session.exec(statement).all()

            full: Dict[int, FullAlbum] = {}
            for album, artist, track in rows:
                entry = full.get(album.id)
                if entry is None:
                    entry = FullAlbum(album=_album_read(album, artist), tracks=[])
                    full[album.id] = entry
                if track is not None:
                    entry.tracks.append(_track_read(track))
            return list(full.values())

    def stats(self) -> LibraryStats:
        with self.session() as session:
            artists = session.exec(select(func.count()).select_from(Artist)).one()
            albums = session.exec(select(func.count()).select_from(Album)).one()
            tracks = session.exec(select(func.count()).select_from(Track)).one()
            with_artwork = session.exec(
                select(func.count())
                .select_from(Album)
                .where(col(Album.artwork_path).is_not(None))
            ).one()
        return LibraryStats(
            artists=artists,
            albums=albums,
            tracks=tracks,
            albums_with_artwork=with_artwork,
        )
