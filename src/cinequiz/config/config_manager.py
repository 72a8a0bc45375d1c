"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from .models import Config

DEFAULT_CONFIG: Dict[str, Any] = {
    "tmdb": {
        "api_key": "${TMDB_API_KEY}",
        "pool_pages": 3,
        "min_vote_count": 1000,
    },
    "game": {
        "cast": {
            "reveal_budget": 6,
            "min_cast_size": 6,
            "max_selection_attempts": 10,
            "history_limit": 50,
        },
        "filmography": {
            "time_limit_seconds": 600,
        },
    },
    "logging": {"level": "INFO"},
    "app": {"language": "en", "mode": "popular"},
}


class ConfigManager:
    """Loads, caches and validates the YAML configuration."""

    def __init__(self, config_path: Optional[Path] = None, env_file: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file. If None, searches standard locations.
            env_file: Optional ``.env`` file loaded before variable expansion.
        """
        self._config_path = config_path
        self._env_file = env_file
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load and validate configuration.

        Returns:
            Validated configuration object.

        Raises:
            FileNotFoundError: If configuration file is not found.
            ValueError: If configuration is invalid.
            yaml.YAMLError: If YAML parsing fails.
        """
        if self._config is not None:
            return self._config

        config_path = self._find_config_file()
        raw_config = self._load_yaml_file(config_path)

        try:
            self._config = Config(**raw_config)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}")

        return self._config

    def reload_config(self) -> Config:
        """Drop the cached configuration and load it again."""
        self._config = None
        return self.load_config()

    def get_config(self) -> Config:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def search_paths(self) -> List[Path]:
        """Candidate configuration locations, highest priority first."""
        paths = [
            Path.cwd() / "config" / "config.yaml",
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "cinequiz" / "config.yaml",
            Path.home() / ".cinequiz" / "config.yaml",
        ]

        env_config = os.getenv("CINEQUIZ_CONFIG")
        if env_config:
            paths.insert(0, Path(env_config))

        return paths

    def _find_config_file(self) -> Path:
        if self._config_path is not None:
            if self._config_path.exists():
                return self._config_path
            raise FileNotFoundError(f"Configuration file not found: {self._config_path}")

        search_paths = self.search_paths()
        for path in search_paths:
            if path.exists():
                return path

        raise FileNotFoundError(
            f"Configuration file not found in any of these locations: "
            f"{[str(p) for p in search_paths]}"
        )

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load YAML file with environment variable expansion.

        Variables from a ``.env`` file (explicit, or discovered from the working
        directory) are loaded first without overriding the real environment.

        Args:
            path: Path to YAML file.

        Returns:
            Parsed YAML data with environment variables expanded.

        Raises:
            yaml.YAMLError: If YAML parsing fails.
        """
        if self._env_file is not None:
            load_dotenv(self._env_file, override=False)
        else:
            load_dotenv(override=False)

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        content = os.path.expandvars(content)

        try:
            result = yaml.safe_load(content)
            if not isinstance(result, dict):
                raise yaml.YAMLError(f"YAML file {path} must contain a dictionary at root level")
            return result
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}")

    @classmethod
    def create_default_config(cls, output_path: Path) -> None:
        """Write a starter configuration file.

        Args:
            output_path: Path where to create the configuration file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(DEFAULT_CONFIG, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config_file(self, config_path: Path) -> bool:
        """Validate a configuration file without loading it as current config.

        Args:
            config_path: Path to configuration file to validate.

        Returns:
            True if configuration is valid, False otherwise.
        """
        try:
            raw_config = self._load_yaml_file(config_path)
            Config(**raw_config)
            return True
        except (ValidationError, yaml.YAMLError, FileNotFoundError):
            return False
