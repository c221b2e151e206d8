"""Tests for config.ini loading."""

from pathlib import Path

import pytest

from musicsync import config as config_module
from musicsync.config import get_config, load_config, reset_config_cache, write_default_config


def test_write_default_config_then_load(tmp_path):
    config_path = tmp_path / "config.ini"

    write_default_config(tmp_path / "music", "Home Library", config_path)
    config = load_config(config_path)

    assert config.library_path == tmp_path / "music"
    assert config.library.name == "Home Library"
    assert config.server_port == 3030
    assert config.database.pool_size == 5
    assert config.scanner.reload_on_start is True


def test_load_config_reads_overrides(tmp_path):
    config_path = tmp_path / "config.ini"
    config_path.write_text(
        "[library]\n"
        f"path = {tmp_path / 'music'}\n"
        "[server]\n"
        "port = 8080\n"
        "[database]\n"
        f"path = {tmp_path / 'index.db'}\n"
        "pool_size = 2\n"
        "pool_timeout = 1.5\n"
        "[scanner]\n"
        "reload_on_start = no\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.server_port == 8080
    assert config.database_path == tmp_path / "index.db"
    assert config.database.pool_timeout == 1.5
    assert config.scanner.reload_on_start is False


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.ini")


def test_load_config_rejects_empty_pool(tmp_path):
    config_path = tmp_path / "config.ini"
    config_path.write_text("[database]\npool_size = 0\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_get_config_loads_once_from_data_dir(tmp_path, monkeypatch):
    config_path = tmp_path / "config.ini"
    write_default_config(tmp_path / "music", "Cached", config_path)
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", config_path)
    reset_config_cache()
    try:
        first = get_config()
        config_path.unlink()

        assert get_config() is first
        assert first.library.name == "Cached"

        reset_config_cache()
        with pytest.raises(FileNotFoundError):
            get_config()
    finally:
        reset_config_cache()
