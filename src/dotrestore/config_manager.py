"""Configuration management for dotrestore."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, fields

from .utils.logger import get_utils_logger


def default_config_dir(home: Optional[Path] = None) -> Path:
    """Default config directory, ``~/.config/dotrestore``."""
    return (home or Path.home()) / ".config" / "dotrestore"


@dataclass
class RestoreConfig:
    """Restore configuration data class.

    Relative directories are resolved against the user's home directory.
    """
    dotfiles_dir: str = "Workspace/dotfiles"
    config_dest_dir: str = ".config"
    formulae_file: str = "brew_formulae.txt"
    casks_file: str = "brew_casks.txt"
    brew_command: str = "brew"


class ConfigManager:
    """Manages application configuration from YAML files."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir is not None else default_config_dir()
        self._config_cache = {}
        self.logger = get_utils_logger("config_manager")
        self.logger.debug(f"Config manager initialized: config_dir={self.config_dir}")

    def load_config(self, config_name: str) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if config_name in self._config_cache:
            self.logger.debug(f"Using cached config: {config_name}")
            return self._config_cache[config_name]

        config_path = self.config_dir / f"{config_name}.yaml"
        self.logger.debug(f"Loading config file: {config_path}")

        if not config_path.exists():
            self.logger.error(f"Config file not found: {config_path}")
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)

            if config is None:
                self.logger.warning(f"Config file is empty: {config_name}")
                config = {}

            if not isinstance(config, dict):
                raise ValueError(f"Config file {config_path} must contain a mapping")

            self.logger.debug(f"Parsed config: {config_name} ({len(config)} top-level keys)")
            self._config_cache[config_name] = config
            return config

        except yaml.YAMLError as e:
            self.logger.error(f"YAML parse failed [{config_name}]: {e}")
            raise
        except IOError as e:
            self.logger.error(f"Failed to read config file [{config_path}]: {e}")
            raise

    def get_restore_config(self) -> RestoreConfig:
        """Get restore configuration, falling back to defaults when restore.yaml is absent."""
        if not (self.config_dir / "restore.yaml").exists():
            self.logger.debug("No restore.yaml found, using default paths")
            return RestoreConfig()

        config = self.load_config("restore")
        section = config.get("restore", config)
        if not isinstance(section, dict):
            raise ValueError("restore.yaml: 'restore' section must be a mapping")

        known = {f.name for f in fields(RestoreConfig)}
        unknown = set(section) - known
        if unknown:
            self.logger.error(f"Unknown keys in restore.yaml: {sorted(unknown)}")
            raise ValueError(f"Unknown keys in restore.yaml: {', '.join(sorted(unknown))}")

        empty = sorted(k for k, v in section.items() if v is None)
        if empty:
            self.logger.warning(f"Ignoring empty keys in restore.yaml, defaults apply: {empty}")

        restore_config = RestoreConfig(**{k: str(v) for k, v in section.items() if v is not None})
        self.logger.debug(f"Restore config loaded: {restore_config}")
        return restore_config


def resolve_dir(value: str, home: Path) -> Path:
    """Expand ``~`` and anchor relative directories at ``home``."""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = home / path
    return path


def load_restore_config(config_dir: Optional[Path] = None) -> RestoreConfig:
    """Convenience wrapper used by the CLI."""
    return ConfigManager(config_dir).get_restore_config()
