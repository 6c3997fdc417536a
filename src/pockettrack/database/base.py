"""Abstract record store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from pockettrack.domain.entities import (
    Category,
    EntityKind,
    ScheduledBill,
    ScheduledBillInstance,
    Transaction,
    User,
)

Entity = User | Category | Transaction | ScheduledBill | ScheduledBillInstance

ENTITY_TYPES: dict[EntityKind, type] = {
    EntityKind.USERS: User,
    EntityKind.CATEGORIES: Category,
    EntityKind.TRANSACTIONS: Transaction,
    EntityKind.SCHEDULED_BILLS: ScheduledBill,
    EntityKind.SCHEDULED_BILL_INSTANCES: ScheduledBillInstance,
}


class RecordStore(ABC):
    """Abstract record store for pockettrack.

    A store keeps one flat collection per ``EntityKind``. Records go in as
    field dicts and come out as domain entities. Every write stands alone:
    there are no multi-record transactions.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the backing storage."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables or the empty document)."""
        pass

    @abstractmethod
    def insert(self, kind: EntityKind, record: dict[str, Any]) -> Entity:
        """Assign an identifier, persist the record and return the stored entity.

        Raises:
            ConflictError: If the generated identifier already exists
            ValidationError: If the record does not form a valid entity
        """
        pass

    @abstractmethod
    def update(self, kind: EntityKind, record_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into a record. Does nothing if the record is absent."""
        pass

    @abstractmethod
    def delete(self, kind: EntityKind, record_id: str) -> None:
        """Remove a record. Does nothing if the record is absent."""
        pass

    @abstractmethod
    def get(self, kind: EntityKind, record_id: str) -> Optional[Entity]:
        """Get a record by ID."""
        pass

    @abstractmethod
    def query_by_field(self, kind: EntityKind, field: str, value: Any) -> list[Entity]:
        """Return all records whose field equals value, in insertion order.

        Raises:
            ValidationError: If the field is not part of the entity
        """
        pass

    @abstractmethod
    def list_all(self, kind: EntityKind) -> list[Entity]:
        """Return every record of a kind, in insertion order."""
        pass
