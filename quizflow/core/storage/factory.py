"""Build the configured draft store."""

from __future__ import annotations

from quizflow.config.settings import ConfigManager, get_config_manager
from .draft_store import DraftStore
from .file_draft_store import FileDraftStore
from .sql_draft_store import SQLDraftStore


def create_draft_store(config_manager: ConfigManager | None = None) -> DraftStore:
    """Create the draft store selected by ``drafts.type``."""
    config_manager = config_manager or get_config_manager()
    store_type = config_manager.draft_store_type

    if store_type == "file":
        return FileDraftStore(config_manager.draft_file_base_dir, key=config_manager.draft_key)
    if store_type == "sql":
        return SQLDraftStore(config_manager.draft_sql_connection_string,
                             key=config_manager.draft_key)
    raise ValueError(f"Unsupported draft store type: {store_type}")
