"""Tests for configuration loading."""

from __future__ import annotations

from tracker.config import load_config


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path / "missing.yaml")
    assert config.storage.backend == "file"
    assert config.logging.level == "info"
    assert config.notifications.max_pending == 50


def test_yaml_sections_applied(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n"
        "  port: 9100\n"
        "storage:\n"
        "  backend: memory\n"
        "  unknown_key: ignored\n"
        "logging:\n"
        "  format: json\n"
    )
    config = load_config(path)
    assert config.server.port == 9100
    assert config.storage.backend == "memory"
    assert not hasattr(config.storage, "unknown_key")
    assert config.logging.format == "json"


def test_env_overrides_win(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("storage:\n  base_dir: from-yaml\n")
    monkeypatch.setenv("RIDELOG_STORAGE_BASE_DIR", "from-env")
    monkeypatch.setenv("RIDELOG_SERVER_PORT", "8123")
    monkeypatch.setenv("RIDELOG_NOTIFICATIONS_MAX_PENDING", "5")

    config = load_config(path)
    assert config.storage.base_dir == "from-env"
    assert config.server.port == 8123
    assert config.notifications.max_pending == 5


def test_logging_overrides_use_log_prefix(tmp_path, monkeypatch):
    monkeypatch.setenv("RIDELOG_LOG_LEVEL", "debug")
    monkeypatch.setenv("RIDELOG_LOG_FORMAT", "json")

    config = load_config(tmp_path / "missing.yaml")
    assert config.logging.level == "debug"
    assert config.logging.format == "json"
