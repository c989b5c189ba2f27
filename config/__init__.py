"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    Settings: Settings class
    check_storage_configuration: Storage configuration health check
"""

from config.settings import settings, get_settings, Settings
from config.storage import check_storage_configuration

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",

    # Storage
    "check_storage_configuration",
]
