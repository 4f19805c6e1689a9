"""Tests for logging configuration."""

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

import notebook_repo.logging.logging_config as logging_config
from notebook_repo.logging import get_pipeline_logger, setup_logging
from notebook_repo.logging.logging_config import DEFAULT_LOG_LEVELS, LoggingConfig


@pytest.fixture(autouse=True)
def _restore_global_config() -> Iterator[None]:
    saved = logging_config._logging_config
    with patch.dict(os.environ):
        yield
    logging_config._logging_config = saved


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_config_path_from_env(self):
        with patch.dict(os.environ, {"NOTEBOOK_REPO_LOGGING_CONFIG": "/path/to/config.yml"}):
            config = LoggingConfig()
            assert config.config_path == Path("/path/to/config.yml")

    def test_config_path_from_prefect_env(self):
        with patch.dict(os.environ, {"PREFECT_LOGGING_SETTINGS_PATH": "/prefect/config.yml"}, clear=True):
            config = LoggingConfig()
            assert config.config_path == Path("/prefect/config.yml")

    def test_own_env_wins_over_prefect(self):
        env = {"NOTEBOOK_REPO_LOGGING_CONFIG": "/ours.yml", "PREFECT_LOGGING_SETTINGS_PATH": "/prefect.yml"}
        with patch.dict(os.environ, env):
            assert LoggingConfig().config_path == Path("/ours.yml")

    def test_no_config_path_returns_none(self):
        with patch.dict(os.environ, clear=True):
            config = LoggingConfig()
            assert config.config_path is None

    def test_load_config_from_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "logging.yml"
        config_file.write_text("""
version: 1
disable_existing_loggers: false
handlers:
  console:
    class: logging.StreamHandler
""")

        loaded = LoggingConfig(config_path=config_file).load_config()

        assert loaded["version"] == 1
        assert loaded["disable_existing_loggers"] is False
        assert "console" in loaded["handlers"]

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path):
        loaded = LoggingConfig(config_path=tmp_path / "absent.yml").load_config()
        assert "notebook_repo" in loaded["loggers"]

    def test_default_component_levels(self):
        with patch.dict(os.environ, clear=True):
            loggers = LoggingConfig().load_config()["loggers"]
        assert {name: entry["level"] for name, entry in loggers.items()} == DEFAULT_LOG_LEVELS
        assert loggers["notebook_repo"]["handlers"] == ["console"]
        assert "handlers" not in loggers["notebook_repo.storage"]

    def test_level_env_overrides_every_component(self):
        with patch.dict(os.environ, {"NOTEBOOK_REPO_LOG_LEVEL": "DEBUG"}, clear=True):
            loggers = LoggingConfig().load_config()["loggers"]
        assert {entry["level"] for entry in loggers.values()} == {"DEBUG"}

    def test_config_is_cached(self, tmp_path: Path):
        config_file = tmp_path / "logging.yml"
        config_file.write_text("version: 1\n")
        config = LoggingConfig(config_path=config_file)
        first = config.load_config()
        config_file.write_text("version: 1\nincremental: true\n")
        assert config.load_config() is first

    @patch("logging.config.dictConfig")
    def test_apply_config(self, mock_dict_config: Mock) -> None:
        LoggingConfig().apply()

        mock_dict_config.assert_called_once()
        assert mock_dict_config.call_args[0][0]["version"] == 1

    @patch("logging.config.dictConfig")
    def test_apply_with_prefect_settings(self, mock_dict_config: Mock) -> None:
        with patch.dict(os.environ, clear=True):
            custom_config = {"version": 1, "loggers": {"prefect": {"level": "DEBUG"}}}
            with patch.object(LoggingConfig, "load_config", return_value=custom_config):
                LoggingConfig().apply()

                assert os.environ.get("PREFECT_LOGGING_LEVEL") == "DEBUG"


class TestSetupLogging:
    """Test setup_logging function."""

    @patch("notebook_repo.logging.logging_config.LoggingConfig.apply")
    def test_setup_logging_basic(self, mock_apply: Mock) -> None:
        setup_logging()
        mock_apply.assert_called_once()

    @patch("notebook_repo.logging.logging_config.get_logger")
    @patch("notebook_repo.logging.logging_config.LoggingConfig.apply")
    def test_setup_logging_with_level(self, mock_apply: Mock, mock_get_logger: Mock) -> None:
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        setup_logging(level="DEBUG")

        assert mock_get_logger.call_count == len(DEFAULT_LOG_LEVELS)
        mock_logger.setLevel.assert_called_with("DEBUG")
        assert os.environ["PREFECT_LOGGING_LEVEL"] == "DEBUG"

    @patch("notebook_repo.logging.logging_config.LoggingConfig")
    def test_setup_logging_with_config_path(self, mock_config_class: Mock, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yml"
        mock_instance = MagicMock()
        mock_config_class.return_value = mock_instance

        setup_logging(config_path=config_file)

        mock_config_class.assert_called_once_with(config_file)
        mock_instance.apply.assert_called_once()


class TestGetPipelineLogger:
    """Test get_pipeline_logger function."""

    @patch("notebook_repo.logging.logging_config.setup_logging")
    @patch("notebook_repo.logging.logging_config.get_logger")
    def test_get_pipeline_logger_ensures_setup(self, mock_get_logger: Mock, mock_setup: Mock) -> None:
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger
        logging_config._logging_config = None

        logger = get_pipeline_logger("notebook_repo.repo.storage_repo")

        mock_setup.assert_called_once()
        mock_get_logger.assert_called_with("notebook_repo.repo.storage_repo")
        assert logger == mock_logger

    @patch("notebook_repo.logging.logging_config.get_logger")
    def test_get_pipeline_logger_reuses_config(self, mock_get_logger: Mock) -> None:
        logging_config._logging_config = MagicMock()

        with patch("notebook_repo.logging.logging_config.setup_logging") as mock_setup:
            get_pipeline_logger("module1")
            get_pipeline_logger("module2")

            mock_setup.assert_not_called()
            assert mock_get_logger.call_count == 2
