"""
Engine settings for configuration resolution.

These settings govern the resolver itself, not the daemon it configures:
what to do with unrecognised setting paths, and how to log.  They are
read from ``STREAMD_*`` environment variables.

Tags:
    streamd, configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from streamd.core.logging import configure_logging

from .components import UnknownSettingPolicy


class ResolverSettings(BaseSettings):
    """Configuration-resolution engine settings.

    All fields can be set via ``STREAMD_*`` environment variables (e.g.
    ``STREAMD_UNKNOWN_SETTINGS=ignore``).
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMD_",
        extra="ignore",
        frozen=True,
    )

    unknown_settings: UnknownSettingPolicy = Field(
        default=UnknownSettingPolicy.FAIL,
        description="Fail on, or log and skip, setting paths the engine does not recognise",
    )

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="json | console")

    @property
    def json_logging(self) -> bool:
        return self.log_format.lower() == "json"

    def configure_logging(self) -> None:
        """Apply ``log_level`` / ``log_format`` to structlog."""
        configure_logging(level=self.log_level, json_format=self.json_logging)


_settings_cache: dict[str, ResolverSettings] = {}


def get_settings(*, _force_reload: bool = False) -> ResolverSettings:
    """Load and cache a :class:`ResolverSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = ResolverSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
