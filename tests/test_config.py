"""Tests for YAML config loading and defaults."""

import pytest

from feedcluster.config import load_config


def test_defaults_are_filled_in(tmp_path, monkeypatch):
    monkeypatch.delenv("FEEDCLUSTER_THRESHOLD", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("sources:\n  rss_urls:\n    - https://example.com/rss\n", encoding="utf-8")
    config = load_config(str(path))
    assert config["sources"]["rss_urls"] == ["https://example.com/rss"]
    assert config["clustering"]["threshold"] == 50
    assert config["options"]["fetch_timeout_sec"] == 15
    assert config["options"]["rss_max_per_feed"] == 0
    assert config["filters"] == {"include_keywords": [], "exclude_domains": []}
    assert set(config["render"]["tier_colors"]) == {"HIGH", "MEDIUM", "LOW"}


def test_explicit_values_win(tmp_path, monkeypatch):
    monkeypatch.delenv("FEEDCLUSTER_THRESHOLD", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("clustering:\n  threshold: 65\noptions:\n  max_workers: 1\n", encoding="utf-8")
    config = load_config(str(path))
    assert config["clustering"]["threshold"] == 65
    assert config["options"]["max_workers"] == 1
    assert config["sources"]["rss_urls"] == []


def test_empty_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("FEEDCLUSTER_THRESHOLD", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path))["clustering"]["threshold"] == 50


def test_environment_overrides_threshold(tmp_path, monkeypatch):
    monkeypatch.setenv("FEEDCLUSTER_THRESHOLD", "70")
    path = tmp_path / "config.yaml"
    path.write_text("clustering:\n  threshold: 40\n", encoding="utf-8")
    assert load_config(str(path))["clustering"]["threshold"] == 70.0


def test_non_numeric_environment_threshold_fails(tmp_path, monkeypatch):
    monkeypatch.setenv("FEEDCLUSTER_THRESHOLD", "lots")
    path = tmp_path / "config.yaml"
    path.write_text("{}\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_missing_explicit_path_fails(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_non_mapping_top_level_fails(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))
