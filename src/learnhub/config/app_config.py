"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults. A few values can be overridden from
the environment so the server can be pointed at another database or
storage root without editing the file.

Usage:
    from learnhub.config.app_config import load_app_config

    config = load_app_config()
    print(config.database.path)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

MIB = 1024 * 1024

# Environment overrides: variable -> (section, key)
ENV_OVERRIDES = {
    "LEARNHUB_DB_PATH": ("database", "path"),
    "LEARNHUB_STORAGE_ROOT": ("storage", "root"),
    "LEARNHUB_PUBLIC_BASE_URL": ("storage", "public_base_url"),
}


@dataclass
class DatabaseConfig:
    """Where the SQLite database lives."""

    path: Path = Path("db/learnhub.db")


@dataclass
class StorageConfig:
    """Blob storage settings."""

    root: Path = Path("data/storage")
    public_base_url: str = "http://127.0.0.1:8000/storage"
    buckets: list[str] = field(default_factory=lambda: ["books", "course-videos"])


@dataclass
class UploadLimits:
    """Maximum accepted upload sizes, in bytes."""

    pdf_max_bytes: int = 50 * MIB
    video_max_bytes: int = 100 * MIB
    image_max_bytes: int = 10 * MIB


@dataclass
class ServerConfig:
    """Bind address for `learnhub serve`."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    uploads: UploadLimits = field(default_factory=UploadLimits)
    server: ServerConfig = field(default_factory=ServerConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {"path": "db/learnhub.db"},
        "storage": {
            "root": "data/storage",
            "public_base_url": "http://127.0.0.1:8000/storage",
            "buckets": ["books", "course-videos"],
        },
        "uploads": {
            "pdf_max_bytes": 50 * MIB,
            "video_max_bytes": 100 * MIB,
            "image_max_bytes": 10 * MIB,
        },
        "server": {"host": "127.0.0.1", "port": 8000},
    }


def _merge(defaults: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    """Overlay file values on top of defaults, one section deep."""
    result = {section: dict(values) for section, values in defaults.items()}
    for section, values in (data or {}).items():
        if isinstance(values, dict) and section in result:
            result[section].update(values)
        else:
            result[section] = values
    return result


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data.setdefault(section, {})[key] = value
            logger.debug("config.env_override", variable=env_var)
    return data


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    db_data = data.get("database", {})
    storage_data = data.get("storage", {})
    uploads_data = data.get("uploads", {})
    server_data = data.get("server", {})

    return AppConfig(
        database=DatabaseConfig(path=Path(db_data.get("path", "db/learnhub.db"))),
        storage=StorageConfig(
            root=Path(storage_data.get("root", "data/storage")),
            public_base_url=str(
                storage_data.get("public_base_url", "http://127.0.0.1:8000/storage")
            ).rstrip("/"),
            buckets=list(storage_data.get("buckets", ["books", "course-videos"])),
        ),
        uploads=UploadLimits(
            pdf_max_bytes=int(uploads_data.get("pdf_max_bytes", 50 * MIB)),
            video_max_bytes=int(uploads_data.get("video_max_bytes", 100 * MIB)),
            image_max_bytes=int(uploads_data.get("image_max_bytes", 10 * MIB)),
        ),
        server=ServerConfig(
            host=server_data.get("host", "127.0.0.1"),
            port=int(server_data.get("port", 8000)),
        ),
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    defaults = _get_defaults()

    if CONFIG_FILE.exists():
        logger.debug("config.loading", source=str(CONFIG_FILE))
        file_data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
        data = _merge(defaults, file_data)
    else:
        logger.info("config.using_defaults")
        data = defaults

    _cached_config = _parse_config(_apply_env_overrides(data))
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
