"""Domain layer for pockettrack application."""

# Services import the record store layer, which imports domain.entities;
# resolve them lazily so importing an entity never pulls in a service.
_SERVICES = {
    "UserService": "pockettrack.domain.user",
    "CategoryService": "pockettrack.domain.category",
    "TransactionService": "pockettrack.domain.transaction",
    "ScheduledBillService": "pockettrack.domain.scheduled_bill",
    "SummaryService": "pockettrack.domain.summary",
    "TipService": "pockettrack.domain.tips",
    "DataTransferService": "pockettrack.domain.transfer",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
