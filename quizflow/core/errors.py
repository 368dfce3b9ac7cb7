"""
Exception types raised inside QuizFlow.

The resolution and sanitization pipeline never raises for malformed
documents; these exceptions cover the I/O edges (draft storage and
export files) and are converted to notices or exit codes by callers.
"""

from __future__ import annotations


class QuizFlowError(Exception):
    """Base class for QuizFlow errors."""


class DraftStoreError(QuizFlowError):
    """A draft storage backend could not read, write or delete a draft."""

    def __init__(self, operation: str, key: str, reason: str | None = None):
        self.operation = operation
        self.key = key
        self.reason = reason
        message = f"Draft {operation} failed for key '{key}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ExportError(QuizFlowError):
    """An export document could not be produced or written."""
