"""Identifier generation for stored records and series."""

import uuid
from typing import Callable

from pockettrack.domain.entities import EntityKind

IdFactory = Callable[[str], str]

ID_PREFIXES = {
    EntityKind.USERS: "user",
    EntityKind.CATEGORIES: "cat",
    EntityKind.TRANSACTIONS: "trans",
    EntityKind.SCHEDULED_BILLS: "bill",
    EntityKind.SCHEDULED_BILL_INSTANCES: "bill-inst",
}

SERIES_PREFIX = "series"


def new_id(prefix: str) -> str:
    """Return a fresh opaque identifier such as ``trans-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"


def new_series_id() -> str:
    """Return a fresh series identifier."""
    return new_id(SERIES_PREFIX)
