"""Tests for the Typer commands, run against a temporary config and index."""

import pytest
from typer.testing import CliRunner

import main
from musicsync import config as config_module
from musicsync.config import reset_config_cache

runner = CliRunner()


@pytest.fixture
def configured(tmp_path, monkeypatch, build_library):
    """A config.ini pointing at a one-album library and an index under tmp_path."""
    root = build_library({"A": {"B": ["song1.mp3", "song2.mp3", "cover.jpg"]}})
    config_path = tmp_path / "config.ini"
    config_path.write_text(
        "[library]\n"
        f"path = {root}\n"
        "[database]\n"
        f"path = {tmp_path / 'index.db'}\n"
        "pool_size = 2\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", config_path)

    levels = []
    monkeypatch.setattr(main, "setup_logging", levels.append)

    reset_config_cache()
    yield levels
    reset_config_cache()


def test_stats_without_config_exits_with_error(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "missing.ini")
    reset_config_cache()

    result = runner.invoke(main.app, ["stats"])

    assert result.exit_code == 1
    assert "config.ini not found" in result.output


def test_scan_then_stats(configured):
    scan = runner.invoke(main.app, ["scan"])
    assert scan.exit_code == 0, scan.output
    assert "1 artists, 1 albums, 2 tracks" in scan.output

    stats = runner.invoke(main.app, ["stats"])
    assert stats.exit_code == 0, stats.output
    assert "Artists: 1" in stats.output
    assert "Tracks: 2" in stats.output
    assert "Albums with artwork: 1 / 1 (100%)" in stats.output


def test_scan_path_overrides_configured_library(configured, tmp_path):
    other = tmp_path / "other"
    (other / "X" / "Y").mkdir(parents=True)
    (other / "X" / "Y" / "only.mp3").write_bytes(b"x")

    result = runner.invoke(main.app, ["scan", "--path", str(other)])

    assert result.exit_code == 0, result.output
    assert "1 artists, 1 albums, 1 tracks" in result.output


def test_scan_missing_root_exits_with_error(configured, tmp_path):
    result = runner.invoke(main.app, ["scan", "--path", str(tmp_path / "nowhere")])

    assert result.exit_code == 1
    assert "Resync failed" in result.output


def test_log_level_option_reaches_logging_setup(configured):
    result = runner.invoke(main.app, ["scan", "--log-level", "debug"])

    assert result.exit_code == 0, result.output
    assert configured == ["DEBUG"]


def test_unknown_log_level_is_rejected(configured):
    result = runner.invoke(main.app, ["scan", "--log-level", "chatty"])

    assert result.exit_code != 0
    assert configured == []


def test_serve_rescans_given_path_before_serving(configured, tmp_path, monkeypatch):
    other = tmp_path / "other"
    (other / "X" / "Y").mkdir(parents=True)
    (other / "X" / "Y" / "only.mp3").write_bytes(b"x")

    served = {}

    def fake_run_server(config, store, host=None, port=None, log_level="info"):
        served["artists"] = [a.name for a in store.list_artists()]
        served["log_level"] = log_level

    monkeypatch.setattr(main, "run_server", fake_run_server)

    result = runner.invoke(main.app, ["serve", "--path", str(other), "--log-level", "warning"])

    assert result.exit_code == 0, result.output
    assert served == {"artists": ["X"], "log_level": "WARNING"}
    assert configured == ["WARNING"]


def test_serve_no_reload_keeps_existing_index(configured, monkeypatch):
    assert runner.invoke(main.app, ["scan"]).exit_code == 0

    served = {}
    monkeypatch.setattr(
        main, "run_server", lambda config, store, **kwargs: served.update(artists=store.list_artists())
    )

    result = runner.invoke(main.app, ["serve", "--no-reload", "--path", "/does/not/exist"])

    assert result.exit_code == 0, result.output
    assert [a.name for a in served["artists"]] == ["A"]
