"""
SQL draft store.

Keeps drafts in a ``drafts`` table (key, data, updated_at) through
SQLAlchemy, so any database SQLAlchemy supports can hold them. The draft
is stored as text rather than a JSON column so a damaged value can still
be read back and rejected by the loader.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from quizflow.config.settings import DEFAULT_DRAFT_KEY
from quizflow.core.errors import DraftStoreError
from .draft_store import DraftStore


class SQLDraftStore(DraftStore):
    """Draft store backed by an SQL table."""

    def __init__(self, connection_string: str, key: str = DEFAULT_DRAFT_KEY):
        """
        Args:
            connection_string (str): SQLAlchemy connection string
            key (str): Key the draft is saved under
        """
        super().__init__(key)
        self.logger.debug(
            f"Initializing SQLDraftStore with connection string: {connection_string}")
        self.engine = create_engine(connection_string)
        self.metadata = MetaData()
        self.drafts_table = Table(
            "drafts", self.metadata,
            Column("key", String, primary_key=True),
            Column("data", Text, nullable=False),
            Column("updated_at", String),
        )
        self.metadata.create_all(self.engine)

    def read_raw(self, key: str) -> str | None:
        query = select(self.drafts_table.c.data).where(self.drafts_table.c.key == key)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as e:
            raise DraftStoreError("read", key, str(e)) from e
        return row._mapping["data"] if row is not None else None

    def write_raw(self, key: str, value: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(self.drafts_table).where(self.drafts_table.c.key == key))
                conn.execute(insert(self.drafts_table).values(
                    key=key, data=value, updated_at=datetime.now().isoformat()))
        except SQLAlchemyError as e:
            raise DraftStoreError("write", key, str(e)) from e

    def delete_raw(self, key: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(self.drafts_table).where(self.drafts_table.c.key == key))
        except SQLAlchemyError as e:
            raise DraftStoreError("delete", key, str(e)) from e
