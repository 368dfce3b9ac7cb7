import logging

import pytest

from quizflow.logging.log_manager import LogManager
from quizflow.logging.setup import (
    get_logger,
    is_logging_configured,
    reset_logging,
    setup_logging,
)


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


def test_get_logger_before_setup():
    logger = get_logger("quizflow.tests.early")
    assert not is_logging_configured()
    assert logger.handlers


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "quizflow.log"
    setup_logging({
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "file": {"class": "logging.FileHandler", "filename": str(log_file), "level": "DEBUG"},
        },
        "loggers": {
            "quizflow.tests.configured": {"level": "DEBUG", "handlers": ["file"]},
        },
    })
    assert is_logging_configured()

    logger = get_logger("quizflow.tests.configured")
    logger.debug("written to the file")
    for handler in logger.handlers:
        handler.flush()

    assert "written to the file" in log_file.read_text()


def test_setup_logging_is_idempotent():
    setup_logging({})
    first = LogManager.get_instance()
    setup_logging({"handlers": {"x": {"class": "logging.StreamHandler"}}})
    assert LogManager.get_instance() is first


def test_invalid_config_falls_back():
    manager = LogManager({"handlers": {"broken": {"class": "no.such.Handler"}}})
    assert manager.get_logger("quizflow.tests.fallback") is logging.getLogger(
        "quizflow.tests.fallback")
