"""
Process-wide logging configuration.

``LogManager`` applies a ``dictConfig`` dictionary once per process,
creating the directories of file handlers first. A config that
``dictConfig`` rejects degrades to ``basicConfig`` so a bad logging
section never stops the program.
"""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Any


class LogManager:
    """Applies the logging section of the settings; one instance per process."""

    _instance: LogManager | None = None

    def __init__(self, logger_settings: dict[str, Any] | None):
        self.logger_settings = dict(logger_settings or {})
        if not self.logger_settings.get("handlers"):
            # Nothing to configure, keep whatever the host process set up
            return

        self.logger_settings.setdefault("version", 1)
        self._ensure_log_dirs()

        try:
            logging.config.dictConfig(self.logger_settings)
        except (ValueError, TypeError, AttributeError, ImportError) as e:
            logging.basicConfig(level=logging.INFO)
            logging.getLogger(__name__).warning(
                f"Logging config rejected, using basic console logging: {e}")

    def _ensure_log_dirs(self) -> None:
        for handler in self.logger_settings["handlers"].values():
            filename = handler.get("filename") if isinstance(handler, dict) else None
            directory = os.path.dirname(filename) if filename else ""
            if directory:
                os.makedirs(directory, exist_ok=True)

    @classmethod
    def get_instance(cls, logger_settings: dict[str, Any] | None = None) -> LogManager:
        """Return the process LogManager, configuring logging on first call."""
        if cls._instance is None:
            cls._instance = cls(logger_settings)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Let the next get_instance() reconfigure logging (for testing)."""
        cls._instance = None

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)
