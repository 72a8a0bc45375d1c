"""Configuration data models."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_LANGUAGES = {"en", "es"}
MOVIE_MODES = {"popular", "top_rated", "now_playing", "upcoming"}


class TMDbConfig(BaseModel):
    """TMDb API configuration."""

    api_key: str = Field(..., description="TMDb API key")
    base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDb API base URL")
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p", description="TMDb image CDN base URL"
    )
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")
    pool_pages: int = Field(
        default=3, ge=1, le=20, description="Listing pages fetched per candidate pool"
    )
    min_vote_count: int = Field(
        default=1000, ge=0, description="Minimum votes for popular/top rated pool members"
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)


class CastGameConfig(BaseModel):
    """Cast-reveal round settings."""

    reveal_budget: int = Field(default=6, ge=1, description="Maximum cast members revealed")
    min_cast_size: int = Field(
        default=6, ge=6, description="Cast members with photos a subject must have"
    )
    max_cast_order: int = Field(
        default=10, gt=0, description="Only cast billed above this order qualify"
    )
    max_selection_attempts: int = Field(
        default=10, ge=1, le=10, description="Draws before the pool is refilled"
    )
    history_limit: int = Field(default=50, gt=0, description="Round results kept in history")


class FilmographyGameConfig(BaseModel):
    """Filmography naming round settings."""

    time_limit_seconds: Optional[int] = Field(
        default=600, ge=0, description="Round time limit, 0 or null for no limit"
    )
    tick_interval_seconds: float = Field(
        default=1.0, gt=0.0, description="Wall-clock seconds per countdown tick"
    )


class GameConfig(BaseModel):
    """Game engine configuration."""

    cast: CastGameConfig = Field(default_factory=CastGameConfig)
    filmography: FilmographyGameConfig = Field(default_factory=FilmographyGameConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class AppConfig(BaseModel):
    """Application behavior configuration."""

    language: str = Field(default="en", description="Content language")
    mode: str = Field(default="popular", description="Default cast game mode")
    results_file: Optional[str] = Field(
        default=None, description="JSON lines file that receives round results"
    )

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate content language."""
        if v.lower() not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Language must be one of: {SUPPORTED_LANGUAGES}")
        return v.lower()

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        """Validate movie mode."""
        if v not in MOVIE_MODES:
            raise ValueError(f"Mode must be one of: {MOVIE_MODES}")
        return v


class Config(BaseModel):
    """Main configuration model."""

    tmdb: TMDbConfig = Field(..., description="TMDb configuration")
    game: GameConfig = Field(default_factory=GameConfig, description="Game configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    app: AppConfig = Field(default_factory=AppConfig, description="Application configuration")

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )
