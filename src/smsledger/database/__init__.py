"""Database layer for smsledger application."""

from smsledger.database.base import Database
from smsledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
