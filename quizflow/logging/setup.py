"""
Logging entry points for QuizFlow modules.

Modules call ``get_logger(__name__)`` at import time. Until the CLI (or
an embedding application) loads the settings and calls
``setup_logging``, those loggers print to the console on their own::

    config_manager = get_config_manager()
    config_manager.load()
    setup_logging(config_manager.logging_config)
"""

from __future__ import annotations

import logging
from typing import Any

from quizflow.logging.log_manager import LogManager

_FALLBACK_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_logging_configured = False
_log_manager: LogManager | None = None


def setup_logging(logging_config: dict[str, Any]) -> None:
    """Apply ``logging_config`` (a dictConfig dictionary); later calls are no-ops."""
    global _logging_configured, _log_manager

    if _logging_configured:
        logging.getLogger(__name__).debug("Logging already set up")
        return

    _log_manager = LogManager.get_instance(logging_config)
    _logging_configured = True
    logging.getLogger(__name__).debug("Logging set up from configuration")


def get_logger(name: str) -> logging.Logger:
    """
    Logger for ``name``.

    Before setup_logging() runs, the logger gets its own INFO console
    handler so import-time messages are not lost.
    """
    if _logging_configured and _log_manager is not None:
        return _log_manager.get_logger(name)

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FALLBACK_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def is_logging_configured() -> bool:
    return _logging_configured


def reset_logging() -> None:
    """Undo setup_logging() so the next call configures again (for testing)."""
    global _logging_configured, _log_manager
    _logging_configured = False
    _log_manager = None
    LogManager.reset_instance()
