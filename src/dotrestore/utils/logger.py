"""Universal logging configuration for dotrestore."""

import logging
import logging.config
import logging.handlers
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from rich.logging import RichHandler
from rich.console import Console


def default_logs_dir(home: Optional[Path] = None) -> Path:
    """Default log directory, ``~/.local/state/dotrestore/logs``."""
    return (home or Path.home()) / ".local" / "state" / "dotrestore" / "logs"


class LoggerManager:
    """Manages application-wide logging configuration."""

    _instance: Optional['LoggerManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LoggerManager':
        """Singleton pattern to ensure single logger manager instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logger manager (singleton safe)."""
        if not self._initialized:
            self.config_dir: Optional[Path] = None
            self.debug_mode: bool = False
            self.console: Console = Console(highlight=False)
            self._loggers: Dict[str, logging.Logger] = {}
            LoggerManager._initialized = True

    def initialize(self, config_dir: Path, debug: bool = False,
                   console: Optional[Console] = None,
                   logs_dir: Optional[Path] = None) -> None:
        """Initialize the logging system.

        Args:
            config_dir: Configuration directory path
            debug: Enable debug mode
            console: Rich console instance for consistent output
            logs_dir: Directory for the rotating log file
        """
        self.config_dir = config_dir
        self.debug_mode = debug
        if console is not None:
            self.console = console

        logs_dir = logs_dir or default_logs_dir()
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.console.print(f"[yellow]Warning: cannot create log directory {logs_dir}: {e}[/yellow]")
            logs_dir = None

        self._configure_root_logger(logs_dir)

        logger = self.get_logger("dotrestore.logger")
        logger.debug("Logging system initialized")
        if debug:
            logger.debug("Debug mode enabled")

    def _load_logging_config(self) -> Dict[str, Any]:
        """Load logging configuration from YAML file.

        Returns:
            Logging configuration dictionary
        """
        config = self._get_default_config()
        if self.config_dir is None:
            return config

        config_file = self.config_dir / "logging.yaml"
        if config_file.exists():
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    overrides = yaml.safe_load(f) or {}
                for key, value in overrides.items():
                    if isinstance(value, dict) and isinstance(config.get(key), dict):
                        config[key].update(value)
                    else:
                        config[key] = value
            except (OSError, yaml.YAMLError) as e:
                self.console.print(f"[yellow]Warning: Failed to load logging config, using default: {e}[/yellow]")

        return config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default logging configuration."""
        return {
            'level': 'DEBUG' if self.debug_mode else 'INFO',
            'console_level': 'DEBUG' if self.debug_mode else 'INFO',
            'file_level': 'DEBUG',
            'format': {
                'console': '%(message)s',
                'file': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            },
            'modules': {
                'dotrestore.app': 'INFO',
                'dotrestore.modules': 'DEBUG' if self.debug_mode else 'INFO',
                'dotrestore.utils': 'DEBUG' if self.debug_mode else 'WARNING'
            }
        }

    def _configure_root_logger(self, logs_dir: Optional[Path]) -> None:
        """Configure the root logger with handlers.

        Args:
            logs_dir: Directory for log files, or None to skip the file handler
        """
        config = self._load_logging_config()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self._resolve_level(config['level'], logging.INFO))

        console_handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            markup=False,
            show_path=self.debug_mode,
            show_time=False,
        )
        console_handler.setLevel(self._resolve_level(config['console_level'], logging.INFO))
        console_handler.setFormatter(logging.Formatter(config['format']['console']))
        root_logger.addHandler(console_handler)

        if logs_dir is not None:
            file_handler = logging.handlers.RotatingFileHandler(
                logs_dir / "dotrestore.log",
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(self._resolve_level(config['file_level'], logging.DEBUG))
            file_handler.setFormatter(logging.Formatter(config['format']['file']))
            root_logger.addHandler(file_handler)

        for module_name, level in config.get('modules', {}).items():
            logging.getLogger(module_name).setLevel(self._resolve_level(level, logging.INFO))

    def _resolve_level(self, value: Any, default: int) -> int:
        """Turn a level name such as ``info`` or ``WARNING`` into its number.

        Unknown names fall back to ``default`` with a warning.
        """
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        level = logging.getLevelName(str(value).upper())
        if isinstance(level, int):
            return level
        self.console.print(f"[yellow]Warning: unknown log level {value!r} in logging config, "
                           f"using {logging.getLevelName(default)}[/yellow]")
        return default

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger instance for the specified name."""
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]


# Global logger manager instance
logger_manager = LoggerManager()


def init_logging(config_dir: Path, debug: bool = False, console: Optional[Console] = None,
                 logs_dir: Optional[Path] = None) -> None:
    """Initialize the logging system.

    Args:
        config_dir: Configuration directory path
        debug: Enable debug mode
        console: Rich console instance
        logs_dir: Directory for the rotating log file
    """
    logger_manager.initialize(config_dir, debug, console, logs_dir)


def get_console() -> Console:
    """Get the shared console used for progress output."""
    return logger_manager.console


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logger_manager.get_logger(name)


def get_app_logger() -> logging.Logger:
    """Get the main application logger."""
    return get_logger("dotrestore.app")


def get_module_logger(module_name: str) -> logging.Logger:
    """Get a module-specific logger.

    Args:
        module_name: Module name

    Returns:
        Module logger
    """
    return get_logger(f"dotrestore.modules.{module_name}")


def get_utils_logger(util_name: str) -> logging.Logger:
    """Get a utility-specific logger."""
    return get_logger(f"dotrestore.utils.{util_name}")
