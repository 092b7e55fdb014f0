"""Construction of the ledger database from paths and URLs."""

import os
from pathlib import Path
from typing import Optional

from finkeep.database.sqlalchemy_db import SQLAlchemyDatabase
from finkeep.log import get_logger

DB_PATH_ENVVAR = "FINKEEP_DB_PATH"
DEFAULT_DB_DIR = ".finkeep"
DEFAULT_DB_FILE = "finkeep.db"

logger = get_logger(__name__)


def default_database_path() -> Path:
    """Return ``$FINKEEP_DB_PATH`` if set, else ``~/.finkeep/finkeep.db``."""
    configured = os.environ.get(DB_PATH_ENVVAR)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / DEFAULT_DB_DIR / DEFAULT_DB_FILE


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Create a ledger database for any SQLAlchemy URL."""
    return SQLAlchemyDatabase(database_url)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed ledger database.

    Args:
        database_path: Path to the SQLite file; falls back to
            default_database_path(). Missing parent directories are created.

    Returns:
        SQLAlchemyDatabase bound to the file
    """
    path = Path(database_path).expanduser() if database_path else default_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("database.open", path=str(path))
    return create_database(f"sqlite:///{path}")
