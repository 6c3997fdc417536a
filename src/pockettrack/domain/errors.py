"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DataImportError(DomainError):
    """An import document could not be read or applied."""


def user_not_found(user: str) -> str:
    """Return message for missing user by ID or email."""
    return f"User '{user}' not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def bill_instance_not_found(instance_id: str) -> str:
    """Return message for missing scheduled bill instance."""
    return f"Scheduled bill instance {instance_id} not found"


def duplicate_record_id(kind: str, record_id: str) -> str:
    """Return message for an identifier collision on insert."""
    return f"Record '{record_id}' already exists in {kind}"


def required_field(field_name: str) -> str:
    """Return message for a missing required field."""
    return f"Field '{field_name}' is required"


def category_type_mismatch(category_name: str, category_type: str, expected_type: str) -> str:
    """Return message for a category used with the other transaction type."""
    return f"Category '{category_name}' is an {category_type} category, not {expected_type}"
