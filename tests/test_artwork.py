"""Tests for cover art discovery."""

from pathlib import Path

from musicsync.artwork import ARTWORK_FILENAMES, is_artwork, resolve_artwork


def test_resolve_artwork_prefers_first_name_in_priority_order(tmp_path):
    for name in ("cover.jpeg", "artwork.jpg", "cover.png"):
        (tmp_path / name).write_bytes(b"img")

    assert resolve_artwork(tmp_path) == tmp_path / "cover.png"


def test_resolve_artwork_returns_none_without_candidates(tmp_path):
    (tmp_path / "folder.jpg").write_bytes(b"img")
    (tmp_path / "01.mp3").write_bytes(b"audio")

    assert resolve_artwork(tmp_path) is None


def test_resolve_artwork_ignores_directories_named_like_artwork(tmp_path):
    (tmp_path / "cover.jpg").mkdir()
    (tmp_path / "artwork.jpg").write_bytes(b"img")

    assert resolve_artwork(tmp_path) == tmp_path / "artwork.jpg"


def test_is_artwork_is_exact_and_case_sensitive():
    assert is_artwork(Path("/m/A/B/cover.jpg"))
    assert not is_artwork(Path("/m/A/B/Cover.jpg"))
    assert not is_artwork(Path("/m/A/B/cover.jpg.mp3"))
    assert len(ARTWORK_FILENAMES) == len(set(ARTWORK_FILENAMES))
