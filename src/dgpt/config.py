"""Configuration management for the dgpt assistant."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .utils.datetime import INPUT_FORMAT

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_home() -> str:
    """Root directory for data and config; ``DGPT_HOME`` overrides it."""
    return os.environ.get("DGPT_HOME", "~/.dgpt")


@dataclass
class ConfigModel:
    """Global configuration model for dgpt."""

    # File paths
    data_dir: str = ""
    backup_dir: str = ""
    data_file: str = "tasks.md"

    # Date preferences
    date_input_format: str = INPUT_FORMAT

    # Behavior settings
    backup_on_save: bool = False

    # UI and logging
    no_color: bool = False
    log_level: str = "WARNING"

    def __post_init__(self):
        """Post-initialization setup."""
        home = default_home()
        if not self.data_dir:
            self.data_dir = home
        if not self.backup_dir:
            self.backup_dir = str(Path(self.data_dir) / "backups")
        self.data_dir = os.path.expanduser(self.data_dir)
        self.backup_dir = os.path.expanduser(self.backup_dir)

        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            logger.warning("Unknown log level %r, using WARNING", self.log_level)
            self.log_level = "WARNING"

        if not isinstance(self.date_input_format, str) or not self.date_input_format.strip():
            logger.warning("Invalid date input format %r, using %s", self.date_input_format, INPUT_FORMAT)
            self.date_input_format = INPUT_FORMAT

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a YAML mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    def get_data_path(self) -> Path:
        """Get the task file path."""
        return Path(self.data_dir) / self.data_file

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"

    def get_backup_path(self, timestamp: Optional[str] = None) -> Path:
        """Get backup directory path."""
        if timestamp:
            return Path(self.backup_dir) / timestamp
        return Path(self.backup_dir)


class Config:
    """Configuration manager for dgpt."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file or create default."""
        if cls._instance is not None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, 'r', encoding="utf-8") as f:
                    yaml_content = f.read()
                config = ConfigModel.from_yaml(yaml_content)
                logger.info("Loaded configuration from %s", config_path)
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                logger.warning("Failed to load config from %s: %s. Using default configuration.",
                               config_path, e)
        else:
            cls.save(config, config_path)

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w', encoding="utf-8") as f:
                f.write(config.to_yaml())
            logger.info("Configuration saved to %s", config_path)
        except OSError as e:
            logger.error("Failed to save config to %s: %s", config_path, e)

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)
