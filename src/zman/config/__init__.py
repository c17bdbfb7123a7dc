"""Configuration models and loaders for zman."""

from zman.config.app import AppConfig, InstallSettings, LoggingSettings, ZellijSettings, load_config

__all__ = [
    "AppConfig",
    "InstallSettings",
    "LoggingSettings",
    "ZellijSettings",
    "load_config",
]
