"""
File draft store.

Keeps each draft as ``{base_dir}/{key}.json``. Writes go through a
temporary file and ``os.replace`` so a draft is either fully written or
left as it was.
"""

from __future__ import annotations

import os
import re
import tempfile

from quizflow.config.settings import DEFAULT_DRAFT_KEY
from quizflow.core.errors import DraftStoreError
from .draft_store import DraftStore

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class FileDraftStore(DraftStore):
    """Draft store backed by JSON files in a directory."""

    def __init__(self, base_dir: str, key: str = DEFAULT_DRAFT_KEY):
        """
        Args:
            base_dir (str): Directory holding the draft files
            key (str): Key the draft is saved under
        """
        super().__init__(key)
        self.base_dir = str(base_dir)
        self.logger.debug(f"Using file draft store at {self.base_dir}")

    def _path(self, key: str) -> str:
        return os.path.join(self.base_dir, f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json")

    def read_raw(self, key: str) -> str | None:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise DraftStoreError("read", key, str(e)) from e

    def write_raw(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            os.makedirs(self.base_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.base_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise DraftStoreError("write", key, str(e)) from e

    def delete_raw(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as e:
            raise DraftStoreError("delete", key, str(e)) from e
