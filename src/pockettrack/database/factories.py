"""Record store factory functions."""

import os
from pathlib import Path
from typing import Optional

from pockettrack.database.base import RecordStore
from pockettrack.database.json_store import JsonRecordStore
from pockettrack.database.sqlalchemy_db import SQLAlchemyRecordStore


def default_store_path() -> str:
    """Return the store path from POCKETTRACK_DB_PATH or ~/.pockettrack/pockettrack.db."""
    database_path = os.environ.get("POCKETTRACK_DB_PATH")
    if database_path is None:
        db_dir = Path.home() / ".pockettrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "pockettrack.db")
    return database_path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyRecordStore:
    """Create a SQLite record store.

    Args:
        database_path: Path to SQLite database file. If None, checks POCKETTRACK_DB_PATH
            environment variable, then defaults to ~/.pockettrack/pockettrack.db

    Returns:
        SQLAlchemyRecordStore instance configured for SQLite
    """
    if database_path is None:
        database_path = default_store_path()

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyRecordStore(database_url)


def create_json_store(document_path: str) -> JsonRecordStore:
    """Create a record store persisted as a single JSON document."""
    return JsonRecordStore(document_path)


def create_record_store(path: Optional[str] = None) -> RecordStore:
    """Create a record store, choosing the backend from the path.

    A ``.json`` suffix selects the JSON document store; anything else is a
    SQLite database.
    """
    if path is None:
        path = default_store_path()
    if Path(path).suffix.lower() == ".json":
        return create_json_store(path)
    return create_sqlite_database(path)
