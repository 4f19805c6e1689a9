"""Centralized logging configuration for notebook-repo.

@public

Logging integrates with Prefect's logging system. Configuration comes from a
YAML file when one is provided, otherwise from built-in defaults.

Usage:
    >>> from notebook_repo.logging import get_pipeline_logger
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Repository opened")

Environment variables:
    NOTEBOOK_REPO_LOGGING_CONFIG: Path to custom logging.yml
    NOTEBOOK_REPO_LOG_LEVEL: Default log level (INFO, DEBUG, etc.)
    PREFECT_LOGGING_LEVEL: Prefect's logging level
    PREFECT_LOGGING_SETTINGS_PATH: Alternative config path
"""

import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from prefect.logging import get_logger

# Per-component levels of the default configuration; NOTEBOOK_REPO_LOG_LEVEL overrides all of them.
DEFAULT_LOG_LEVELS = {
    "notebook_repo": "INFO",
    "notebook_repo.notes": "INFO",
    "notebook_repo.storage": "WARNING",
    "notebook_repo.repo": "INFO",
}


def _component_loggers(level_override: Optional[str]) -> Dict[str, Any]:
    """dictConfig "loggers" section: the package logger owns the handler, components propagate to it."""
    loggers: Dict[str, Any] = {}
    for name, level in DEFAULT_LOG_LEVELS.items():
        entry: Dict[str, Any] = {"level": level_override or level}
        if "." not in name:
            entry.update(handlers=["console"], propagate=False)
        loggers[name] = entry
    return loggers


class LoggingConfig:
    """Manages logging configuration for the repository.

    @public

    Configuration precedence:
        1. Explicit config_path parameter
        2. NOTEBOOK_REPO_LOGGING_CONFIG environment variable
        3. PREFECT_LOGGING_SETTINGS_PATH environment variable
        4. Default configuration

    Example:
        >>> config = LoggingConfig(Path("custom_logging.yml"))
        >>> config.apply()

    Note:
        Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config: Optional[Dict[str, Any]] = None

    @staticmethod
    def _get_default_config_path() -> Optional[Path]:
        """Get config path from environment variables, None when unset."""
        if env_path := os.environ.get("NOTEBOOK_REPO_LOGGING_CONFIG"):
            return Path(env_path)

        if prefect_path := os.environ.get("PREFECT_LOGGING_SETTINGS_PATH"):
            return Path(prefect_path)

        return None

    def load_config(self) -> Dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary in logging.config.dictConfig format.

        Note:
            Configuration is cached after first load. Create a new
            LoggingConfig instance to reload from disk.
        """
        if self._config is None:
            if self.config_path and self.config_path.exists():
                with open(self.config_path, "r") as f:
                    self._config = yaml.safe_load(f)
            else:
                self._config = self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get default logging configuration.

        Default format:
            "HH:MM:SS.mmm | LEVEL | logger.name - message"
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
                "detailed": {
                    "format": (
                        "%(asctime)s | %(levelname)-7s | %(name)s | "
                        "%(funcName)s:%(lineno)d - %(message)s"
                    ),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": _component_loggers(os.environ.get("NOTEBOOK_REPO_LOG_LEVEL")),
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self):
        """Apply the configuration via logging.config.dictConfig.

        Also exports PREFECT_LOGGING_LEVEL when the configuration defines a
        "prefect" logger.
        """
        config = self.load_config()
        logging.config.dictConfig(config)

        if "prefect" in config.get("loggers", {}):
            prefect_level = config["loggers"]["prefect"].get("level", "INFO")
            os.environ.setdefault("PREFECT_LOGGING_LEVEL", prefect_level)


# Global configuration instance
_logging_config: Optional[LoggingConfig] = None


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Setup logging for notebook-repo.

    @public

    Args:
        config_path: Optional path to YAML logging configuration file.
                    If None, uses environment variables or defaults.
        level: Optional log level override (INFO, DEBUG, WARNING, etc.).

    Example:
        >>> setup_logging()
        >>> setup_logging(Path("custom.yml"), level="WARNING")

    Note:
        Reconfigures logging each time it is called. Usually called once at startup.
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            logger = get_logger(logger_name)
            logger.setLevel(level)

        os.environ["PREFECT_LOGGING_LEVEL"] = level


def get_pipeline_logger(name: str):
    """Get a Prefect-integrated logger, initializing logging on first use.

    @public

    Args:
        name: Logger name, typically __name__.

    Example:
        >>> logger = get_pipeline_logger(__name__)
        >>> logger.warning("Checkpoint feature isn't supported")
    """
    if _logging_config is None:
        setup_logging()

    return get_logger(name)
