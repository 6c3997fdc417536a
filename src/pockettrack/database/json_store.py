"""JSON document record store implementation.

All collections live in one JSON document with parallel lists (``users``,
``categories``, ``transactions``, ``scheduledBills``,
``scheduledBillInstances``). The document is rewritten after every
mutation, so it is the durable source of truth after each individual write.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from pockettrack.database.base import Entity
from pockettrack.database.memory import MemoryRecordStore
from pockettrack.database.records import (
    DOCUMENT_KEYS,
    build_entity,
    field_names,
    from_document,
    to_document,
)
from pockettrack.domain.entities import EntityKind
from pockettrack.domain.errors import DomainError
from pockettrack.utils.ids import IdFactory, new_id

logger = structlog.get_logger(__name__)


class JsonRecordStore(MemoryRecordStore):
    """Record store persisted as a single JSON document on disk."""

    def __init__(self, path: str | Path, id_factory: IdFactory = new_id):
        """Initialize JSON record store.

        Args:
            path: Location of the JSON document
            id_factory: Callable turning an ID prefix into a new identifier
        """
        super().__init__(id_factory=id_factory)
        self.path = Path(path)

    def connect(self) -> None:
        """Load the document into memory.

        A missing document means an empty store. Keys that are not entity
        fields are dropped. A corrupt document, or one with a record missing a
        required field or holding an invalid value, is replaced by the empty
        default document; its contents are not recovered.
        """
        if not self.path.exists():
            return
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
            loaded = self._decode(document)
        except (json.JSONDecodeError, UnicodeDecodeError, DomainError, TypeError, AttributeError) as e:
            logger.warning("store_document_corrupt", path=str(self.path), error=str(e))
            loaded = {kind: [] for kind in EntityKind}
        for kind, entities in loaded.items():
            self._load_entities(kind, entities)

    def disconnect(self) -> None:
        """Disconnect from the store."""
        # Every write is already flushed
        pass

    def initialize_schema(self) -> None:
        """Create the document with empty collections if it does not exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._save()

    def insert(self, kind: EntityKind, record: dict[str, Any]) -> Entity:
        """Insert a record and rewrite the document."""
        entity = super().insert(kind, record)
        self._save()
        return entity

    def update(self, kind: EntityKind, record_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into a record and rewrite the document."""
        if self.get(kind, record_id) is None:
            return
        super().update(kind, record_id, fields)
        self._save()

    def delete(self, kind: EntityKind, record_id: str) -> None:
        """Remove a record and rewrite the document."""
        if self.get(kind, record_id) is None:
            return
        super().delete(kind, record_id)
        self._save()

    def _decode(self, document: dict[str, Any]) -> dict[EntityKind, list[Entity]]:
        loaded = {}
        for kind, key in DOCUMENT_KEYS.items():
            known = set(field_names(kind))
            entities = []
            for item in document.get(key, []):
                fields = from_document(item)
                unknown = sorted(set(fields) - known)
                if unknown:
                    logger.debug("store_fields_ignored", collection=key, fields=unknown)
                entities.append(build_entity(kind, {k: v for k, v in fields.items() if k in known}))
            loaded[kind] = entities
        return loaded

    def _save(self) -> None:
        document = {
            key: [to_document(entity) for entity in self.list_all(kind)]
            for kind, key in DOCUMENT_KEYS.items()
        }
        self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
