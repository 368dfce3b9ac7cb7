"""
Draft store contract.

A draft is the unsanitized authoring document plus the builder step the
editor was on, kept under one well-known key. The stored value is the
document's JSON with ``currentStep`` merged in as an extra top-level
field.

Backends only move raw text in and out of their medium and raise
DraftStoreError when that fails. The public save/load/clear methods turn
those failures into logged no-ops, so a broken store never interrupts
the editing session.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, NamedTuple

from quizflow.config.settings import DEFAULT_DRAFT_KEY
from quizflow.core.errors import DraftStoreError
from quizflow.core.graph.document import BUILDER_STEP_KEY
from quizflow.logging.setup import get_logger


class Draft(NamedTuple):
    document: dict[str, Any]
    current_step: int | None


def encode_draft(document: dict[str, Any], current_step: int | None) -> str:
    return json.dumps({**document, BUILDER_STEP_KEY: current_step}, ensure_ascii=False)


def decode_draft(raw: str) -> Draft | None:
    """Parse a stored draft; anything that is not a JSON object is treated as absent."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None

    step = data.pop(BUILDER_STEP_KEY, None)
    if isinstance(step, bool) or not isinstance(step, int) or step < 1:
        step = None
    return Draft(document=data, current_step=step)


class DraftStore(ABC):
    """Abstract draft persistence with best-effort save/load/clear."""

    def __init__(self, key: str = DEFAULT_DRAFT_KEY):
        self.key = key
        self.logger = get_logger(__name__)

    @abstractmethod
    def read_raw(self, key: str) -> str | None:
        """Return the stored text for ``key`` or None when nothing is stored."""
        pass

    @abstractmethod
    def write_raw(self, key: str, value: str) -> None:
        """Replace the stored text for ``key``."""
        pass

    @abstractmethod
    def delete_raw(self, key: str) -> None:
        """Remove ``key``; removing a missing key is not an error."""
        pass

    def save(self, document: dict[str, Any], current_step: int | None) -> bool:
        """
        Persist the authoring document and the current builder step.

        Returns:
            bool: True when the draft was written, False otherwise
        """
        if not isinstance(document, dict):
            self.logger.warning("Refusing to save a draft without quiz data")
            return False

        try:
            value = encode_draft(document, current_step)
        except (TypeError, ValueError, RecursionError) as e:
            self.logger.error(f"Draft for key '{self.key}' is not serializable: {e}")
            return False

        try:
            self.write_raw(self.key, value)
        except DraftStoreError as e:
            self.logger.error(f"Error saving draft: {e}")
            return False

        self.logger.debug(f"Saved draft '{self.key}' at step {current_step}")
        return True

    def load(self) -> Draft | None:
        """Return the last saved draft, or None when there is none or it is unreadable."""
        try:
            raw = self.read_raw(self.key)
        except DraftStoreError as e:
            self.logger.error(f"Error loading draft: {e}")
            return None

        if raw is None:
            return None

        draft = decode_draft(raw)
        if draft is None:
            self.logger.warning(f"Ignoring malformed draft stored under '{self.key}'")
        return draft

    def clear(self) -> bool:
        """Remove the persisted draft."""
        try:
            self.delete_raw(self.key)
        except DraftStoreError as e:
            self.logger.error(f"Error clearing draft: {e}")
            return False
        return True
