"""Configuration package for learnhub."""

from learnhub.config.app_config import (
    AppConfig,
    DatabaseConfig,
    ServerConfig,
    StorageConfig,
    UploadLimits,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ServerConfig",
    "StorageConfig",
    "UploadLimits",
    "clear_config_cache",
    "load_app_config",
]
