"""Configuration for the extension install pipeline."""

from pipeline.config import Config, ConfigError, get_config, load_config, reload_config

__all__ = ["Config", "ConfigError", "get_config", "load_config", "reload_config"]
