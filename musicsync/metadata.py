"""Track title extraction.

A MetadataExtractor runs an ordered chain of tag readers against a file. Each
reader either returns a title, returns None (tags readable but untitled), or
raises (unsupported format, corrupt tags, I/O error). The first non-empty
title wins; everything else moves on to the next reader. Failures never leave
this module: a file nobody can read simply has no title.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol, Sequence

from mutagen import File as mutagen_file
from mutagen import MutagenError
from tinytag import TinyTag, TinyTagException

from .errors import TagReadError
from .logging_config import get_logger
from .utils import short_path

logger = get_logger(__name__)


class TagReader(Protocol):
    name: str

    def read_title(self, path: Path) -> Optional[str]:
        ...


def _clean_str(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    # lone surrogates (broken UTF-16 tags, undecodable filenames) cannot be stored
    s = value.strip().encode("utf-8", errors="replace").decode("utf-8")
    return s if s else None


def _first_text(value: Any) -> Optional[str]:
    """
    Mutagen returns different shapes depending on container/tag type:
    - lists of strings (easy tags, Vorbis comments)
    - plain strings
    - objects with `.text`
    We normalize to a single string (first item if multiple).
    """
    if value is None:
        return None

    if isinstance(value, (list, tuple)):
        if not value:
            return None
        return _first_text(value[0])

    text = getattr(value, "text", None)
    if text is not None:
        return _first_text(text)

    if isinstance(value, bytes):
        return _clean_str(value.decode("utf-8", errors="replace"))

    return _clean_str(str(value))


class MutagenTagReader:
    """Reads titles through mutagen's easy interface (ID3, MP4, Vorbis, FLAC, ...)."""

    name = "mutagen"

    def read_title(self, path: Path) -> Optional[str]:
        try:
            audio = mutagen_file(path, easy=True)
        except (MutagenError, OSError) as exc:
            raise TagReadError(str(exc)) from exc

        if audio is None:
            raise TagReadError("unsupported or unreadable audio file")

        tags = getattr(audio, "tags", None)
        if not tags:
            return None
        return _first_text(tags.get("title"))


class TinyTagReader:
    """Reads titles through tinytag, which tolerates some files mutagen rejects."""

    name = "tinytag"

    def read_title(self, path: Path) -> Optional[str]:
        try:
            tag = TinyTag.get(str(path))
        except (TinyTagException, OSError) as exc:
            raise TagReadError(str(exc)) from exc
        return _clean_str(tag.title)


def default_readers() -> list[TagReader]:
    return [MutagenTagReader(), TinyTagReader()]


class MetadataExtractor:
    """Extracts a human title from a track file using an ordered fallback of tag readers."""

    def __init__(self, readers: Optional[Sequence[TagReader]] = None):
        self.readers: list[TagReader] = (
            list(readers) if readers is not None else default_readers()
        )

    def extract_title(self, path: Path) -> Optional[str]:
        """Return the first non-empty title any reader finds, else None."""
        for reader in self.readers:
            try:
                title = _clean_str(reader.read_title(path))
            except Exception as exc:
                logger.debug(
                    f"Could not read tags for {short_path(path)} with {reader.name}: {exc}"
                )
                continue

            if title:
                return title
            logger.debug(f"{reader.name}: no title in {short_path(path)}")

        return None
