"""Conversion between field dicts, domain entities and document records.

Record stores accept plain field dicts. This module validates and coerces
them into domain entities, turns entities back into dicts, and translates
to and from the camelCase JSON document layout used for persistence and
export.
"""

import dataclasses
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable

from pockettrack.database.base import ENTITY_TYPES, Entity
from pockettrack.domain.entities import BillStatus, EntityKind, TransactionType
from pockettrack.domain.errors import ValidationError, required_field
from pockettrack.utils.amount_parser import has_cent_precision

DOCUMENT_KEYS = {
    EntityKind.USERS: "users",
    EntityKind.CATEGORIES: "categories",
    EntityKind.TRANSACTIONS: "transactions",
    EntityKind.SCHEDULED_BILLS: "scheduledBills",
    EntityKind.SCHEDULED_BILL_INSTANCES: "scheduledBillInstances",
}


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    # Whole cents only, matching the Numeric(12, 2) columns
    if not has_cent_precision(amount):
        raise ValueError("amount must be finite with at most two decimal places")
    return amount


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not an integer")
    return int(value)


FIELD_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "date": _to_date,
    "start_date": _to_date,
    "due_date": _to_date,
    "created_at": _to_datetime,
    "amount": _to_decimal,
    "type": TransactionType,
    "status": BillStatus,
    "due_day": _to_int,
    "recurring_months": _to_int,
    "is_recurring": bool,
    "is_guest": bool,
}


def field_names(kind: EntityKind) -> tuple[str, ...]:
    """Return the field names of the entity stored under kind."""
    return tuple(f.name for f in dataclasses.fields(ENTITY_TYPES[kind]))


def check_field(kind: EntityKind, field: str) -> None:
    """Raise ValidationError if field is not part of kind's entity."""
    if field not in field_names(kind):
        raise ValidationError(f"Unknown field '{field}' for {kind.value}")


def coerce_value(field: str, value: Any) -> Any:
    """Coerce one field value to its domain type. None passes through."""
    if value is None:
        return None
    converter = FIELD_CONVERTERS.get(field)
    if converter is None:
        return value
    try:
        return converter(value)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise ValidationError(f"Invalid value for '{field}': {value!r} ({e})")


def build_entity(kind: EntityKind, record: dict[str, Any]) -> Entity:
    """Validate a field dict and build the domain entity for kind.

    Raises:
        ValidationError: On unknown fields, missing required fields or values
            that cannot be coerced
    """
    entity_type = ENTITY_TYPES[kind]
    for key in record:
        check_field(kind, key)

    values = {}
    for f in dataclasses.fields(entity_type):
        if f.name in record:
            values[f.name] = coerce_value(f.name, record[f.name])
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise ValidationError(required_field(f.name))
    return entity_type(**values)


def entity_to_record(entity: Entity) -> dict[str, Any]:
    """Return the entity's fields as a dict of domain-typed values."""
    return {f.name: getattr(entity, f.name) for f in dataclasses.fields(entity)}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def to_document(entity: Entity) -> dict[str, Any]:
    """Convert an entity to a JSON-ready camelCase document record."""
    return {
        _camel(name): _to_json_value(value)
        for name, value in entity_to_record(entity).items()
    }


def from_document(document: dict[str, Any]) -> dict[str, Any]:
    """Convert a camelCase document record back to a snake_case field dict."""
    return {_snake(key): value for key, value in document.items()}
