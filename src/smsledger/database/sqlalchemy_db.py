"""SQLAlchemy-backed key-value store."""

import json
from typing import Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smsledger.database.base import Database
from smsledger.database.models import KeyValueEntry, create_session_factory
from smsledger.domain.errors import StorageError
from smsledger.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of the Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        try:
            self.session_factory = create_session_factory(database_url)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not open database '{database_url}': {e}") from e
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def read_snapshot(self, key: str) -> list[Any]:
        """Return the array stored under key, or an empty list if absent."""
        session = self._get_session()
        with LogContext(logger, "read_snapshot", key=key):
            try:
                entry = session.get(KeyValueEntry, key, populate_existing=True)
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError(f"Failed to read '{key}': {e}") from e

            if entry is None:
                return []
            try:
                items = json.loads(entry.value)
            except json.JSONDecodeError as e:
                raise StorageError(f"Stored '{key}' is not valid JSON: {e}") from e
            if not isinstance(items, list):
                raise StorageError(f"Stored '{key}' is not an array")
            return items

    def write_snapshot(self, key: str, items: list[Any]) -> None:
        """Replace the array stored under key."""
        session = self._get_session()
        with LogContext(logger, "write_snapshot", key=key, count=len(items)):
            payload = json.dumps(items)
            try:
                entry = session.get(KeyValueEntry, key)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=payload))
                else:
                    entry.value = payload
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError(f"Failed to write '{key}': {e}") from e
