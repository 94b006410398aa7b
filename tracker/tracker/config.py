"""Tracker configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern RIDELOG_<SECTION>_<KEY> (uppercase),
except the logging section, whose keys are RIDELOG_LOG_LEVEL and RIDELOG_LOG_FORMAT.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    env: str = "dev"  # "dev" or "prod"


@dataclass
class StorageConfig:
    backend: str = "file"  # "file" or "memory"
    base_dir: str = "data/store"


@dataclass
class NotificationsConfig:
    max_pending: int = 50


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = ("server", "storage", "notifications", "logging")


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "RIDELOG_SERVER_HOST": lambda v: setattr(config.server, "host", v),
        "RIDELOG_SERVER_PORT": lambda v: setattr(config.server, "port", int(v)),
        "RIDELOG_SERVER_ENV": lambda v: setattr(config.server, "env", v),
        "RIDELOG_STORAGE_BACKEND": lambda v: setattr(config.storage, "backend", v),
        "RIDELOG_STORAGE_BASE_DIR": lambda v: setattr(config.storage, "base_dir", v),
        "RIDELOG_NOTIFICATIONS_MAX_PENDING": lambda v: setattr(config.notifications, "max_pending", int(v)),
        "RIDELOG_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "RIDELOG_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section_name in _SECTIONS:
            section = getattr(config, section_name)
            for k, v in (raw.get(section_name) or {}).items():
                if hasattr(section, k):
                    setattr(section, k, v)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config
