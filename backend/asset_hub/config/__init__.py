"""Configuration module for backend services."""

from asset_hub.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
