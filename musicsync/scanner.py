"""Filesystem scanner for musicsync.

Crawls a library laid out as Artist/Album/Track into an in-memory candidate
tree, then hands the whole tree to the store for a wipe-and-rebuild.

Implements:
- the Artist -> Album -> Track crawl
- per-track title extraction and per-album artwork discovery
- the resync entry point (crawl, then rebuild)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .artwork import is_artwork, resolve_artwork
from .errors import LibraryScanError
from .logging_config import get_logger
from .metadata import MetadataExtractor
from .utils import display_name, lossy_text
from .store import LibraryStore, ResyncStats

logger = get_logger(__name__)


@dataclass
class TrackCandidate:
    path: Path
    title: Optional[str] = None


@dataclass
class AlbumCandidate:
    path: Path
    title: str
    artwork_path: Optional[Path] = None
    tracks: List[TrackCandidate] = field(default_factory=list)


@dataclass
class ArtistCandidate:
    path: Path
    name: str
    albums: List[AlbumCandidate] = field(default_factory=list)


def _list_dir(path: Path) -> List[Path]:
    """List a directory sorted by name. Any OSError aborts the scan."""
    try:
        return sorted(path.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise LibraryScanError(path, exc.strerror or str(exc)) from exc


class DirectoryWalker:
    """Walks a library root and classifies what it finds into candidates."""

    def __init__(self, extractor: Optional[MetadataExtractor] = None):
        self.extractor = extractor or MetadataExtractor()

    def walk(self, root: Path) -> List[ArtistCandidate]:
        root = root.resolve()
        artists: List[ArtistCandidate] = []

        for entry in _list_dir(root):
            if not entry.is_dir():
                logger.debug(f"Skipping {lossy_text(str(entry))}: not a dir, cannot be an artist")
                continue
            artist = ArtistCandidate(path=entry, name=display_name(entry))
            artist.albums = self._walk_artist(entry)
            artists.append(artist)

        return artists

    def _walk_artist(self, artist_dir: Path) -> List[AlbumCandidate]:
        albums: List[AlbumCandidate] = []

        for entry in _list_dir(artist_dir):
            if not entry.is_dir():
                logger.debug(f"Skipping {lossy_text(str(entry))}: not a dir, cannot be an album")
                continue
            album = AlbumCandidate(
                path=entry,
                title=display_name(entry),
                artwork_path=resolve_artwork(entry),
            )
            album.tracks = self._walk_album(entry)
            albums.append(album)

        return albums

    def _walk_album(self, album_dir: Path) -> List[TrackCandidate]:
        logger.debug(f"Searching for tracks in {lossy_text(str(album_dir))}")
        tracks: List[TrackCandidate] = []

        for entry in _list_dir(album_dir):
            if not entry.is_file() or is_artwork(entry):
                logger.debug(f"Skipping {lossy_text(str(entry))}: not a file or is artwork")
                continue
            tracks.append(
                TrackCandidate(path=entry, title=self.extractor.extract_title(entry))
            )

        return tracks


def resync(
    root: Path,
    store: LibraryStore,
    walker: Optional[DirectoryWalker] = None,
) -> ResyncStats:
    """Replace the whole index with a fresh crawl of `root`.

    The store is untouched if the crawl fails; a failing rebuild rolls back
    to the previous snapshot.
    """
    walker = walker or DirectoryWalker()
    logger.info(f"Reloading library from {root}")

    try:
        artists = walker.walk(root)
    except LibraryScanError as exc:
        logger.error(f"Resync aborted, index left unchanged: {exc}")
        raise

    stats = store.rebuild(artists)
    logger.info(
        f"Resync complete: {stats.artists} artists, {stats.albums} albums, "
        f"{stats.tracks} tracks ({stats.untitled} untitled), {stats.artworks} covers"
    )
    return stats
