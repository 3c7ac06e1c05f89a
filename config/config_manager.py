"""Configuration management for helloworldapp.

Configuration is stored as YAML in the ~/helloworldapp/ directory, next to
the database file. A missing file means every setting has its default.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

APP_NAME = "helloworldapp"


class ConfigError(Exception):
    """Raised when configuration operations fail."""

    pass


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: Optional[str] = None  # Defaults to ~/<app_name>/<app_name>.db
    dir_mode: int = 0o754


class MigrationsConfig(BaseModel):
    """Startup migration behaviour."""

    abort_on_failure: bool = True


class AppConfig(BaseModel):
    """Application configuration."""

    app_name: str = APP_NAME
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    migrations: MigrationsConfig = Field(default_factory=MigrationsConfig)
    log_level: str = "INFO"
    api_host: str = "127.0.0.1"
    api_port: int = 8081
    timeout_seconds: int = 15

    def database_path(self) -> Path:
        """Resolve the database file location."""
        if self.database.path:
            return Path(self.database.path).expanduser()
        return Path.home() / self.app_name / f"{self.app_name}.db"


class ConfigManager:
    """Loads and saves the YAML configuration file.

    Attributes:
        config_dir: Path to the configuration directory.
    """

    DEFAULT_CONFIG_DIR = Path.home() / APP_NAME
    CONFIG_FILE = "config.yaml"

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize the configuration manager.

        Args:
            config_dir: Custom configuration directory path.
        """
        self.config_dir = Path(config_dir) if config_dir else self.DEFAULT_CONFIG_DIR
        self._config: Optional[AppConfig] = None

    @property
    def config_path(self) -> Path:
        """Path to the configuration file."""
        return self.config_dir / self.CONFIG_FILE

    def save(self, config: AppConfig) -> None:
        """Save configuration to the YAML file.

        Args:
            config: The configuration to save.

        Raises:
            ConfigError: If save operation fails.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(
                yaml.safe_dump(config.model_dump(), sort_keys=False),
                encoding="utf-8",
            )
            self._config = config
            logger.info(f"Configuration saved to {self.config_path}")
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

    def load(self) -> AppConfig:
        """Load configuration from the YAML file.

        Returns:
            The loaded AppConfig, or defaults if no file exists.

        Raises:
            ConfigError: If the file can't be read or holds invalid values.
        """
        if not self.config_path.exists():
            logger.debug(f"No configuration at {self.config_path}, using defaults")
            self._config = AppConfig()
            return self._config

        try:
            data = yaml.safe_load(self.config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration format: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration format in {self.config_path}")

        try:
            self._config = AppConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration values: {e}") from e
        return self._config

    def get_config(self) -> AppConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def update(self, **kwargs: Any) -> AppConfig:
        """Update specific configuration values.

        Args:
            **kwargs: Configuration fields to update.

        Returns:
            The updated AppConfig.
        """
        config_dict = self.get_config().model_dump()

        for key, value in kwargs.items():
            if key in config_dict:
                config_dict[key] = value

        try:
            new_config = AppConfig(**config_dict)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration values: {e}") from e
        self.save(new_config)
        return new_config

    def is_configured(self) -> bool:
        """Check if a configuration file exists."""
        return self.config_path.exists()

    def reset(self) -> None:
        """Delete the configuration file."""
        if self.config_path.exists():
            self.config_path.unlink()
        self._config = None
        logger.info("Configuration reset complete")
