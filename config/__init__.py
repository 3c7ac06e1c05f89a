"""helloworldapp - Configuration Module.

This module provides YAML-backed configuration management for the
server and the migration engine.
"""

from .config_manager import AppConfig, ConfigManager, ConfigError

__all__ = ["AppConfig", "ConfigManager", "ConfigError"]
