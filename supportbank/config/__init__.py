"""Configuration package."""

from supportbank.config.settings import (
    ExportSettings,
    ImportSettings,
    LoggingSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ExportSettings",
    "ImportSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
