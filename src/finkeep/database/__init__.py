"""Database layer for finkeep application."""

from finkeep.database.base import Database
from finkeep.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
