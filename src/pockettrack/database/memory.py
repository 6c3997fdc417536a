"""In-memory record store implementation."""

from typing import Any, Optional

from pockettrack.database.base import Entity, RecordStore
from pockettrack.database.records import (
    build_entity,
    check_field,
    coerce_value,
    entity_to_record,
)
from pockettrack.domain.entities import EntityKind
from pockettrack.domain.errors import ConflictError, ValidationError, duplicate_record_id
from pockettrack.utils.ids import ID_PREFIXES, IdFactory, new_id


class MemoryRecordStore(RecordStore):
    """Record store keeping every collection in process memory.

    Collections are insertion-ordered dicts keyed by record ID, so lookups are
    direct and listings keep store-assigned order.
    """

    def __init__(self, id_factory: IdFactory = new_id):
        """Initialize an empty store.

        Args:
            id_factory: Callable turning an ID prefix into a new identifier
        """
        self.id_factory = id_factory
        self._collections: dict[EntityKind, dict[str, Entity]] = {
            kind: {} for kind in EntityKind
        }

    def connect(self) -> None:
        """Connect to the store."""
        # Nothing to open
        pass

    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    def initialize_schema(self) -> None:
        """Initialize the store."""
        # Collections exist from construction
        pass

    def insert(self, kind: EntityKind, record: dict[str, Any]) -> Entity:
        """Assign an identifier, store the record and return the entity."""
        if "id" in record:
            raise ValidationError("Record identifiers are assigned by the store")

        record_id = self.id_factory(ID_PREFIXES[kind])
        collection = self._collections[kind]
        if record_id in collection:
            raise ConflictError(duplicate_record_id(kind.value, record_id))

        entity = build_entity(kind, {**record, "id": record_id})
        collection[record_id] = entity
        return entity

    def update(self, kind: EntityKind, record_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into a record; absent records are ignored."""
        if "id" in fields:
            raise ValidationError("Record identifiers cannot be changed")
        collection = self._collections[kind]
        current = collection.get(record_id)
        if current is None:
            return
        collection[record_id] = build_entity(kind, {**entity_to_record(current), **fields})

    def delete(self, kind: EntityKind, record_id: str) -> None:
        """Remove a record; absent records are ignored."""
        self._collections[kind].pop(record_id, None)

    def get(self, kind: EntityKind, record_id: str) -> Optional[Entity]:
        """Get a record by ID."""
        return self._collections[kind].get(record_id)

    def query_by_field(self, kind: EntityKind, field: str, value: Any) -> list[Entity]:
        """Return records whose field equals value."""
        check_field(kind, field)
        value = coerce_value(field, value)
        return [
            entity
            for entity in self._collections[kind].values()
            if getattr(entity, field) == value
        ]

    def list_all(self, kind: EntityKind) -> list[Entity]:
        """Return every record of a kind."""
        return list(self._collections[kind].values())

    def _load_entities(self, kind: EntityKind, entities: list[Entity]) -> None:
        """Replace a collection with already-identified entities."""
        self._collections[kind] = {entity.id: entity for entity in entities}
