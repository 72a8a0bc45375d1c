"""Configuration management module."""

from .config_manager import ConfigManager
from .models import (
    AppConfig,
    CastGameConfig,
    Config,
    FilmographyGameConfig,
    GameConfig,
    LoggingConfig,
    TMDbConfig,
)

__all__ = [
    "ConfigManager",
    "Config",
    "AppConfig",
    "GameConfig",
    "CastGameConfig",
    "FilmographyGameConfig",
    "LoggingConfig",
    "TMDbConfig",
]
