"""Tests for configuration loading."""

import logging
import os
from pathlib import Path

import pytest

from shelfish.config import Config, get_config, reset_config
from shelfish.log import configure_logging

ENV_VARS = (
    "SHELFISH_DB_PATH",
    "SHELFISH_SKIP_HEADER",
    "SHELFISH_LOG_LEVEL",
    "SHELFISH_SHOW_PROGRESS",
)


@pytest.fixture(autouse=True)
def clean_env():
    """Remove shelfish variables around each test."""
    saved = {name: os.environ.pop(name) for name in ENV_VARS if name in os.environ}
    reset_config()
    yield
    for name in ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)
    reset_config()


class TestConfig:
    """Tests for Config.from_env."""

    def test_defaults(self):
        config = Config.from_env()
        assert config.db_path == Path.home() / ".shelfish" / "shelfish.db"
        assert config.skip_header is False
        assert config.log_level == "WARNING"
        assert config.show_progress is True

    def test_from_env(self, tmp_path):
        os.environ["SHELFISH_DB_PATH"] = str(tmp_path / "books.db")
        os.environ["SHELFISH_SKIP_HEADER"] = "yes"
        os.environ["SHELFISH_LOG_LEVEL"] = "debug"
        os.environ["SHELFISH_SHOW_PROGRESS"] = "0"

        config = Config.from_env()
        assert config.db_path == tmp_path / "books.db"
        assert config.skip_header is True
        assert config.log_level == "DEBUG"
        assert config.show_progress is False

    def test_validate_ok(self, tmp_path):
        os.environ["SHELFISH_DB_PATH"] = str(tmp_path / "sub" / "books.db")
        config = Config.from_env()
        assert config.validate() == []
        assert (tmp_path / "sub").exists()

    def test_validate_bad_log_level(self, tmp_path):
        os.environ["SHELFISH_DB_PATH"] = str(tmp_path / "books.db")
        os.environ["SHELFISH_LOG_LEVEL"] = "chatty"
        errors = Config.from_env().validate()
        assert errors == ["Unknown log level: CHATTY"]

    def test_get_config_cached(self):
        assert get_config() is get_config()
        first = get_config()
        reset_config()
        assert get_config() is not first


class TestLogging:
    """Tests for logging setup."""

    def test_configure_sets_level(self):
        configure_logging("INFO")
        assert logging.getLogger().level == logging.INFO
        configure_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_single_handler(self):
        configure_logging("WARNING")
        before = len(logging.getLogger().handlers)
        configure_logging("WARNING")
        assert len(logging.getLogger().handlers) == before
