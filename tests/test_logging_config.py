"""Tests for the dhchain logging setup."""

import logging

import pytest

from dhchain.utils.logging_config import (
    LOG_LEVEL_ENV_VAR,
    PACKAGE_LOGGER,
    resolve_level,
    setup_logging,
)


class TestResolveLevel:
    def test_default_is_warning(self):
        assert resolve_level() == logging.WARNING

    def test_names_are_case_insensitive(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" Info ") == logging.INFO

    def test_int_passes_through(self):
        assert resolve_level(15) == 15

    def test_environment_supplies_default(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "error")
        assert resolve_level() == logging.ERROR
        # an explicit level still wins
        assert resolve_level("info") == logging.INFO

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("chatty")


class TestSetupLogging:
    def test_configures_package_logger_not_root(self):
        root_handlers = list(logging.getLogger().handlers)
        pkg_logger = setup_logging("info")
        assert pkg_logger.name == PACKAGE_LOGGER
        assert pkg_logger.level == logging.INFO
        assert logging.getLogger().handlers == root_handlers

    def test_repeat_calls_replace_handlers(self):
        before = len(logging.getLogger(PACKAGE_LOGGER).handlers)
        setup_logging("info")
        pkg_logger = setup_logging("debug")
        assert len(pkg_logger.handlers) == before + 1
        assert pkg_logger.level == logging.DEBUG

    def test_log_file_receives_module_records(self, tmp_path):
        log_file = tmp_path / "dhchain.log"
        setup_logging("debug", log_file=str(log_file))
        logging.getLogger("dhchain.kinematics.chain").debug("chain built")
        for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
            handler.flush()
        text = log_file.read_text()
        assert "[DEBUG] dhchain.kinematics.chain: chain built" in text
