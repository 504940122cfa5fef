"""
Configuration Management for SupportBank

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Each section has its own environment prefix so that the log file,
import behaviour and export layout can be tuned independently.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Local debug log configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPPORTBANK_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    file: str = Field(
        default="debug.log",
        description="Path of the append-only debug log"
    )
    level: str = Field(
        default="DEBUG",
        description="Minimum level written to the debug log"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.strip().upper()
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level

    @property
    def file_path(self) -> Path:
        return Path(self.file)


class ImportSettings(BaseSettings):
    """Transaction file import configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPPORTBANK_IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Wiping before every import keeps repeated imports of the same
    # fixture idempotent. Turn it off to accumulate several files.
    wipe_existing: bool = Field(
        default=True,
        description="Reset the ledger before each import"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of imported files"
    )


class ExportSettings(BaseSettings):
    """Ledger export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPPORTBANK_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation used when pretty-printing JSON"
    )
    xml_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation used when pretty-printing XML"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of exported files"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @property
    def imports(self) -> ImportSettings:
        return ImportSettings()

    @property
    def exports(self) -> ExportSettings:
        return ExportSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    sections = {
        "logging": lambda: settings.logging,
        "imports": lambda: settings.imports,
        "exports": lambda: settings.exports,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
