# tests/test_logger.py
"""Tests for logging configuration."""

import logging

import pytest

from docent.logger import QUIET_LOGGERS, configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)


class TestConfigureLogging:
    def test_single_handler(self):
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_level(self):
        configure_logging(logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_third_party_loggers_stay_quiet(self):
        configure_logging(logging.DEBUG)
        assert logging.getLogger("LiteLLM").level == logging.WARNING

    def test_stricter_level_applies_to_third_party(self):
        configure_logging(logging.ERROR)
        assert logging.getLogger("httpx").level == logging.ERROR


def test_get_logger():
    assert get_logger("docent.pipeline") is logging.getLogger("docent.pipeline")
