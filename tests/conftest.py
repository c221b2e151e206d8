"""Shared fixtures: temporary library trees and a store on a temporary SQLite file."""

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from musicsync.database import create_store_engine
from musicsync.metadata import MetadataExtractor
from musicsync.scanner import DirectoryWalker
from musicsync.store import LibraryStore


class StemTitleReader:
    """Tag reader stand-in: the title is the file stem, files named 'untitled*' have none."""

    name = "stem"

    def read_title(self, path: Path) -> Optional[str]:
        if path.stem.startswith("untitled"):
            return None
        return path.stem


@pytest.fixture
def build_library(tmp_path):
    """Return a function that materializes {artist: {album: [filenames]}} under tmp_path/music."""

    def _build(layout: Dict[str, Dict[str, List[str]]]) -> Path:
        root = tmp_path / "music"
        root.mkdir(exist_ok=True)
        for artist, albums in layout.items():
            for album, files in albums.items():
                album_dir = root / artist / album
                album_dir.mkdir(parents=True, exist_ok=True)
                for name in files:
                    (album_dir / name).write_bytes(b"not really audio")
        return root

    return _build


@pytest.fixture
def walker():
    return DirectoryWalker(MetadataExtractor([StemTitleReader()]))


@pytest.fixture
def store(tmp_path):
    engine = create_store_engine(tmp_path / "index.db", pool_size=2, pool_timeout=0.5)
    library_store = LibraryStore(engine)
    library_store.init_schema()
    yield library_store
    library_store.close()


@pytest.fixture
def latin1_library(tmp_path):
    """Library whose artist and track names are Latin-1 bytes, not valid UTF-8."""
    if sys.platform in ("darwin", "win32"):
        pytest.skip("filesystem only accepts valid Unicode names")

    root = tmp_path / "music"
    album_dir = os.path.join(os.fsencode(root), b"Bj\xf6rk", b"Debut")
    os.makedirs(album_dir)
    with open(os.path.join(album_dir, b"caf\xe9.mp3"), "wb") as fh:
        fh.write(b"not really audio")
    with open(os.path.join(album_dir, b"cover.jpg"), "wb") as fh:
        fh.write(b"\xff\xd8jpeg")
    return root
