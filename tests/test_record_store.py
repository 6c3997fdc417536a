"""Contract tests run against every record store implementation."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from pockettrack.database.json_store import JsonRecordStore
from pockettrack.database.memory import MemoryRecordStore
from pockettrack.database.sqlalchemy_db import SQLAlchemyRecordStore
from pockettrack.domain import entities
from pockettrack.domain.entities import EntityKind, TransactionType
from pockettrack.domain.errors import ConflictError, ValidationError


def _transaction(**overrides):
    record = {
        "user_id": "user-1",
        "type": TransactionType.EXPENSE,
        "amount": Decimal("42.50"),
        "description": "Groceries",
        "category_id": "cat-1",
        "date": date(2024, 1, 15),
    }
    record.update(overrides)
    return record


class TestRecordStoreContract:
    """Behaviour shared by memory, JSON and SQLite stores."""

    def test_insert_assigns_prefixed_id(self, any_store):
        txn = any_store.insert(EntityKind.TRANSACTIONS, _transaction())

        assert isinstance(txn, entities.Transaction)
        assert txn.id.startswith("trans-")
        assert txn.amount == Decimal("42.50")
        assert txn.is_recurring is False
        assert txn.recurring_series_id is None

    def test_insert_rejects_caller_id(self, any_store):
        with pytest.raises(ValidationError):
            any_store.insert(EntityKind.TRANSACTIONS, _transaction(id="trans-mine"))

    def test_insert_rejects_missing_field(self, any_store):
        record = _transaction()
        del record["description"]
        with pytest.raises(ValidationError, match="description"):
            any_store.insert(EntityKind.TRANSACTIONS, record)

    def test_insert_rejects_unknown_field(self, any_store):
        with pytest.raises(ValidationError, match="Unknown field"):
            any_store.insert(EntityKind.TRANSACTIONS, _transaction(notes="x"))

    def test_insert_rejects_sub_cent_amount(self, any_store):
        with pytest.raises(ValidationError, match="amount"):
            any_store.insert(EntityKind.TRANSACTIONS, _transaction(amount=Decimal("0.001")))
        assert any_store.list_all(EntityKind.TRANSACTIONS) == []

    def test_amount_kept_exactly(self, any_store):
        created = any_store.insert(EntityKind.TRANSACTIONS, _transaction(amount=Decimal("1234.56")))
        assert any_store.get(EntityKind.TRANSACTIONS, created.id).amount == Decimal("1234.56")

    def test_get_returns_domain_entity(self, any_store):
        created = any_store.insert(
            EntityKind.USERS,
            {"name": "Ana", "email": "ana@example.com", "is_guest": False, "created_at": datetime.now(UTC)},
        )

        fetched = any_store.get(EntityKind.USERS, created.id)

        assert isinstance(fetched, entities.User)
        assert fetched.id == created.id
        assert fetched.email == "ana@example.com"

    def test_get_missing_returns_none(self, any_store):
        assert any_store.get(EntityKind.CATEGORIES, "cat-missing") is None

    def test_update_merges_fields(self, any_store):
        txn = any_store.insert(EntityKind.TRANSACTIONS, _transaction())

        any_store.update(EntityKind.TRANSACTIONS, txn.id, {"amount": Decimal("10"), "description": "Market"})

        updated = any_store.get(EntityKind.TRANSACTIONS, txn.id)
        assert updated.amount == Decimal("10")
        assert updated.description == "Market"
        assert updated.date == date(2024, 1, 15)

    def test_update_missing_is_noop(self, any_store):
        any_store.update(EntityKind.TRANSACTIONS, "trans-missing", {"amount": Decimal("1")})
        assert any_store.list_all(EntityKind.TRANSACTIONS) == []

    def test_update_rejects_id_change(self, any_store):
        txn = any_store.insert(EntityKind.TRANSACTIONS, _transaction())
        with pytest.raises(ValidationError):
            any_store.update(EntityKind.TRANSACTIONS, txn.id, {"id": "trans-other"})

    def test_delete_is_idempotent(self, any_store):
        txn = any_store.insert(EntityKind.TRANSACTIONS, _transaction())

        any_store.delete(EntityKind.TRANSACTIONS, txn.id)
        any_store.delete(EntityKind.TRANSACTIONS, txn.id)

        assert any_store.get(EntityKind.TRANSACTIONS, txn.id) is None

    def test_query_by_field(self, any_store):
        a = any_store.insert(EntityKind.TRANSACTIONS, _transaction(recurring_series_id="series-a"))
        b = any_store.insert(EntityKind.TRANSACTIONS, _transaction(recurring_series_id="series-a"))
        any_store.insert(EntityKind.TRANSACTIONS, _transaction(recurring_series_id="series-b"))
        loose = any_store.insert(EntityKind.TRANSACTIONS, _transaction())

        found = any_store.query_by_field(EntityKind.TRANSACTIONS, "recurring_series_id", "series-a")
        assert [t.id for t in found] == [a.id, b.id]

        unlinked = any_store.query_by_field(EntityKind.TRANSACTIONS, "recurring_series_id", None)
        assert [t.id for t in unlinked] == [loose.id]

    def test_query_coerces_values(self, any_store):
        txn = any_store.insert(EntityKind.TRANSACTIONS, _transaction())
        found = any_store.query_by_field(EntityKind.TRANSACTIONS, "type", "expense")
        assert [t.id for t in found] == [txn.id]

    def test_query_unknown_field(self, any_store):
        with pytest.raises(ValidationError, match="Unknown field"):
            any_store.query_by_field(EntityKind.TRANSACTIONS, "notes", "x")

    def test_list_all_keeps_insertion_order(self, any_store):
        ids = [
            any_store.insert(EntityKind.CATEGORIES, {"user_id": "u", "name": name, "type": "expense"}).id
            for name in ("Food", "Bills", "Leisure")
        ]
        assert [c.id for c in any_store.list_all(EntityKind.CATEGORIES)] == ids


@pytest.mark.parametrize(
    "make_store",
    [
        lambda tmp_path, factory: MemoryRecordStore(id_factory=factory),
        lambda tmp_path, factory: JsonRecordStore(tmp_path / "store.json", id_factory=factory),
        lambda tmp_path, factory: SQLAlchemyRecordStore(
            f"sqlite:///{tmp_path / 'store.db'}", id_factory=factory
        ),
    ],
    ids=["memory", "json", "sqlite"],
)
def test_duplicate_generated_id_raises_conflict(tmp_path, make_store):
    """A colliding identifier is rejected instead of overwriting."""
    store = make_store(tmp_path, lambda prefix: f"{prefix}-fixed")
    store.connect()
    store.initialize_schema()

    first = store.insert(EntityKind.CATEGORIES, {"user_id": "u", "name": "Food", "type": "expense"})
    with pytest.raises(ConflictError):
        store.insert(EntityKind.CATEGORIES, {"user_id": "u", "name": "Bills", "type": "expense"})

    assert store.get(EntityKind.CATEGORIES, first.id).name == "Food"
    store.disconnect()
