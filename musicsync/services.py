"""Query services: read-only composition over the library store.

Keeps lookup logic separate from routes. Delivering file bytes is left to
the caller; these functions only resolve paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .errors import EntityNotFound
from .schemas import AlbumRead, ArtistRead, FullAlbum, LibraryStats, TrackRead
from .store import LibraryStore


class QueryService:
    def __init__(self, store: LibraryStore):
        self.store = store

    def list_artists(self) -> List[ArtistRead]:
        return self.store.list_artists()

    def list_albums(self, artist_id: Optional[int] = None) -> List[AlbumRead]:
        return self.store.list_albums(artist_id)

    def list_album_tracks(self, album_id: int) -> List[TrackRead]:
        return self.store.list_album_tracks(album_id)

    def find_album_artwork(self, album_id: int) -> Path:
        return self.store.find_album_artwork(album_id)

    def list_artist_full_albums(self, artist_id: int) -> List[FullAlbum]:
        return self.store.list_artist_full_albums(artist_id)

    def find_album_track(self, album_id: int, track_id: int) -> TrackRead:
        """Return the track only if it belongs to the album."""
        for track in self.store.list_album_tracks(album_id):
            if track.id == track_id:
                return track
        raise EntityNotFound(f"Track for album {album_id}", track_id)

    def library_stats(self) -> LibraryStats:
        return self.store.stats()
