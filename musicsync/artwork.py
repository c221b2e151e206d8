"""Cover art discovery inside album directories."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

# Priority order: the first existing name wins.
ARTWORK_FILENAMES: tuple[str, ...] = ("cover.jpg", "cover.png", "artwork.jpg", "cover.jpeg")


def is_artwork(path: Path, filenames: Sequence[str] = ARTWORK_FILENAMES) -> bool:
    """Return True if the file's base name is one of the artwork names (exact, case-sensitive)."""
    return path.name in filenames


def resolve_artwork(
    album_dir: Path,
    filenames: Sequence[str] = ARTWORK_FILENAMES,
) -> Optional[Path]:
    """Return the highest-priority artwork file directly inside album_dir, or None."""
    for name in filenames:
        candidate = album_dir / name
        if candidate.is_file():
            return candidate
    return None
