"""Export and import of one user's data as a JSON document."""

import json
from typing import Any

import structlog

from pockettrack.database.base import RecordStore
from pockettrack.database.records import DOCUMENT_KEYS, build_entity, from_document, to_document
from pockettrack.domain.entities import EntityKind
from pockettrack.domain.errors import DataImportError, DomainError
from pockettrack.utils.ids import new_series_id

logger = structlog.get_logger(__name__)

# Parents before children, so references can be remapped while inserting
TRANSFER_KINDS = (
    EntityKind.CATEGORIES,
    EntityKind.TRANSACTIONS,
    EntityKind.SCHEDULED_BILLS,
    EntityKind.SCHEDULED_BILL_INSTANCES,
)


class DataTransferService:
    """Service for backing up and restoring a user's records."""

    def __init__(self, db: RecordStore):
        """Initialize data transfer service.

        Args:
            db: Record store instance
        """
        self.db = db

    def export_user(self, user_id: str) -> str:
        """Serialize a user's categories, transactions, bills and instances.

        Returns:
            JSON document with ``categories``, ``transactions``,
            ``scheduledBills`` and ``scheduledBillInstances`` lists
        """
        document = {
            DOCUMENT_KEYS[kind]: [
                to_document(entity) for entity in self.db.query_by_field(kind, "user_id", user_id)
            ]
            for kind in TRANSFER_KINDS
        }
        return json.dumps(document, indent=2)

    def import_user(self, user_id: str, document: str) -> dict[str, int]:
        """Insert every record of an exported document under user_id.

        Every record gets a fresh identifier. Category, bill and series
        references are rewritten to the new identifiers so series stay
        linked and never merge with series already in the store. A category
        reference that is not part of the document is kept as is.

        The whole document is validated before the first write.

        Args:
            user_id: Target user
            document: JSON text produced by ``export_user``

        Returns:
            Number of imported records per collection key

        Raises:
            DataImportError: If the document is not valid JSON or a record is
                malformed
        """
        try:
            parsed = json.loads(document)
        except (json.JSONDecodeError, TypeError) as e:
            raise DataImportError(f"Import document is not valid JSON: {e}")
        if not isinstance(parsed, dict):
            raise DataImportError("Import document must be a JSON object")

        records = {kind: self._read_records(kind, parsed, user_id) for kind in TRANSFER_KINDS}

        id_map: dict[EntityKind, dict[str, str]] = {kind: {} for kind in TRANSFER_KINDS}
        series_map: dict[str, str] = {}

        def remap_series(old: Any) -> Any:
            if old is None:
                return None
            if old not in series_map:
                series_map[old] = new_series_id()
            return series_map[old]

        counts = {}
        for kind in TRANSFER_KINDS:
            for old_id, fields in records[kind]:
                if "category_id" in fields:
                    categories = id_map[EntityKind.CATEGORIES]
                    fields["category_id"] = categories.get(fields["category_id"], fields["category_id"])
                if "bill_id" in fields:
                    bills = id_map[EntityKind.SCHEDULED_BILLS]
                    fields["bill_id"] = bills.get(fields["bill_id"], fields["bill_id"])
                if "series_id" in fields:
                    fields["series_id"] = remap_series(fields["series_id"])
                if "recurring_series_id" in fields:
                    fields["recurring_series_id"] = remap_series(fields["recurring_series_id"])

                entity = self.db.insert(kind, fields)
                if old_id is not None:
                    id_map[kind][old_id] = entity.id
            counts[DOCUMENT_KEYS[kind]] = len(records[kind])

        logger.info("data_imported", user_id=user_id, series=len(series_map), **counts)
        return counts

    def _read_records(
        self, kind: EntityKind, parsed: dict[str, Any], user_id: str
    ) -> list[tuple[Any, dict[str, Any]]]:
        items = parsed.get(DOCUMENT_KEYS[kind], [])
        if not isinstance(items, list):
            raise DataImportError(f"'{DOCUMENT_KEYS[kind]}' must be a list")

        records = []
        for position, item in enumerate(items):
            if not isinstance(item, dict):
                raise DataImportError(f"{DOCUMENT_KEYS[kind]}[{position}] must be an object")
            fields = from_document(item)
            old_id = fields.pop("id", None)
            fields["user_id"] = user_id
            try:
                build_entity(kind, {**fields, "id": "import-check"})
            except DomainError as e:
                raise DataImportError(f"{DOCUMENT_KEYS[kind]}[{position}]: {e}")
            records.append((old_id, fields))
        return records
