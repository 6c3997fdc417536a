"""Record store layer for pockettrack application."""

from pockettrack.database.base import RecordStore
from pockettrack.database.memory import MemoryRecordStore
from pockettrack.database.json_store import JsonRecordStore
from pockettrack.database.factories import (
    create_json_store,
    create_record_store,
    create_sqlite_database,
)

__all__ = [
    "RecordStore",
    "MemoryRecordStore",
    "JsonRecordStore",
    "create_json_store",
    "create_record_store",
    "create_sqlite_database",
]
