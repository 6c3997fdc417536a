"""Shared pytest fixtures for pockettrack tests."""

import tempfile
import os
import pytest

from pockettrack.database.factories import create_sqlite_database
from pockettrack.database.json_store import JsonRecordStore
from pockettrack.database.memory import MemoryRecordStore
from pockettrack.domain.category import CategoryService
from pockettrack.domain.scheduled_bill import ScheduledBillService
from pockettrack.domain.summary import SummaryService
from pockettrack.domain.transaction import TransactionService
from pockettrack.domain.user import UserService


@pytest.fixture
def temp_db():
    """Create a temporary SQLite record store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_store():
    """Create an empty in-memory record store."""
    store = MemoryRecordStore()
    store.connect()
    store.initialize_schema()
    return store


@pytest.fixture(params=["memory", "json", "sqlite"])
def any_store(request, tmp_path):
    """Yield each record store implementation in turn."""
    if request.param == "memory":
        store = MemoryRecordStore()
    elif request.param == "json":
        store = JsonRecordStore(tmp_path / "store.json")
    else:
        store = create_sqlite_database(database_path=str(tmp_path / "store.db"))
    store.connect()
    store.initialize_schema()
    yield store
    store.disconnect()


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def bill_service(temp_db):
    """Create a ScheduledBillService with a temporary database."""
    return ScheduledBillService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Create a sample user with the default categories."""
    return user_service.create_user(name="Test User", email="test@example.com")


@pytest.fixture
def sample_categories(category_service, sample_user):
    """Return the sample user's categories keyed by name."""
    return {c.name: c for c in category_service.list_categories(sample_user.id)}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
