"""Logging infrastructure for notebook-repo.

@public

Prefect-integrated logging configured from YAML or built-in defaults.

Key components:
    get_pipeline_logger: Factory function for creating loggers
    setup_logging: Initialize logging configuration from YAML
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from notebook_repo.logging import get_pipeline_logger
    >>>
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Listing notebooks")

Note:
    Never import Python's logging module directly. Always use
    get_pipeline_logger() for consistent Prefect integration.
"""

from .logging_config import LoggingConfig, get_pipeline_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_pipeline_logger",
]
