"""Configuration management for the extension script.

Loads configuration from:
1. extension.toml (defaults)
2. Environment variables (overrides)
"""

import os
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

CONFIG_FILENAME = "extension.toml"


class ConfigError(Exception):
    """Configuration file cannot be read or has unknown settings."""

    exit_code = 12

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass
class RegistryConfig:
    """Remote extension registry configuration."""

    url: str = "http://ext.radiantcms.org/"
    timeout: float = 30.0


@dataclass
class TaskRunnerConfig:
    """Task runner used for migration and update hooks."""

    command: list[str] = field(default_factory=lambda: ["rake"])
    namespace: str = "radiant:extensions"
    environment: str = "development"
    environment_variable: str = "RAILS_ENV"
    timeout: int = 600


@dataclass
class FetchConfig:
    """Source acquisition configuration."""

    temp_dir: str = ""  # Empty = system temp directory
    command_timeout: int = 300  # git/svn/gem/tar/unzip
    download_timeout: float = 120.0

    def resolved_temp_dir(self) -> Path:
        """Directory where sources are checked out and unpacked."""
        return Path(self.temp_dir) if self.temp_dir else Path(tempfile.gettempdir())


@dataclass
class ExtensionsConfig:
    """Installed extensions layout.

    Extensions are installed under ``<root>/<subdir>/<name>``. Additional
    roots are only scanned when checking whether an extension is installed.
    """

    root: str = "."
    extra_roots: list[str] = field(default_factory=list)
    subdir: str = "vendor/extensions"


@dataclass
class Config:
    """Main configuration container."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    tasks: TaskRunnerConfig = field(default_factory=TaskRunnerConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extensions: ExtensionsConfig = field(default_factory=ExtensionsConfig)
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary.

        Raises:
            ConfigError: If a section is not a table or has unknown keys.
        """
        sections = {
            "registry": RegistryConfig,
            "tasks": TaskRunnerConfig,
            "fetch": FetchConfig,
            "extensions": ExtensionsConfig,
        }
        values: dict[str, Any] = {}
        for section, section_cls in sections.items():
            settings = data.get(section, {})
            if not isinstance(settings, dict):
                raise ConfigError(f"[{section}] must be a table")
            try:
                values[section] = section_cls(**settings)
            except TypeError as e:
                raise ConfigError(f"Invalid [{section}] settings: {e}") from e
        return cls(**values, log_level=data.get("log_level", "WARNING"))


def find_config_file() -> Path | None:
    """Find extension.toml in current or parent directories.

    Returns:
        Path to extension.toml or None if not found.
    """
    current = Path.cwd()

    for directory in [current, *current.parents]:
        config_path = directory / CONFIG_FILENAME
        if config_path.exists():
            return config_path

    return None


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Optional explicit path to extension.toml

    Returns:
        Config object with merged settings.

    Raises:
        ConfigError: If the file is malformed or has unknown settings.
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, "rb") as f:
                    config_data = tomllib.load(f)
            except (tomllib.TOMLDecodeError, OSError) as e:
                raise ConfigError(f"Failed to read config at {path}: {e}") from e

    task_runner = os.getenv("TASK_RUNNER")
    env_overrides = {
        "registry": {
            "url": os.getenv("REGISTRY_URL"),
        },
        "tasks": {
            "environment": os.getenv("RUNTIME_ENV"),
            "command": task_runner.split() if task_runner else None,
        },
        "extensions": {
            "root": os.getenv("EXTENSIONS_ROOT"),
        },
    }

    # Merge env overrides (only non-None values)
    for section, values in env_overrides.items():
        section_data = config_data.setdefault(section, {})
        if not isinstance(section_data, dict):
            raise ConfigError(f"[{section}] must be a table")
        for key, value in values.items():
            if value is not None:
                section_data[key] = value

    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        config_data["log_level"] = log_level

    return Config.from_dict(config_data)


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config object (loaded once, cached).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Path | str | None = None) -> Config:
    """Force reload of configuration."""
    global _config
    _config = load_config(config_path)
    return _config
