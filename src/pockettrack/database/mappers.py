"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the table layout can change
without touching the domain entities.
"""

from enum import Enum
from typing import Any, Callable

from pockettrack.domain import entities as domain
from pockettrack.database.base import Entity
from pockettrack.database.records import entity_to_record
from pockettrack.database.models import (
    Base,
    User as ORMUser,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    ScheduledBill as ORMScheduledBill,
    ScheduledBillInstance as ORMScheduledBillInstance,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        is_guest=orm_user.is_guest,
        created_at=orm_user.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        type=domain.TransactionType(orm_category.type),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        category_id=orm_transaction.category_id,
        date=orm_transaction.date,
        is_recurring=orm_transaction.is_recurring,
        recurring_months=orm_transaction.recurring_months,
        recurring_series_id=orm_transaction.recurring_series_id,
    )


def scheduled_bill_to_domain(orm_bill: ORMScheduledBill) -> domain.ScheduledBill:
    """Convert SQLAlchemy ScheduledBill model to domain ScheduledBill entity."""
    return domain.ScheduledBill(
        id=orm_bill.id,
        user_id=orm_bill.user_id,
        description=orm_bill.description,
        amount=orm_bill.amount,
        category_id=orm_bill.category_id,
        due_day=orm_bill.due_day,
        recurring_months=orm_bill.recurring_months,
        start_date=orm_bill.start_date,
        series_id=orm_bill.series_id,
    )


def scheduled_bill_instance_to_domain(
    orm_instance: ORMScheduledBillInstance,
) -> domain.ScheduledBillInstance:
    """Convert SQLAlchemy ScheduledBillInstance model to domain entity."""
    return domain.ScheduledBillInstance(
        id=orm_instance.id,
        bill_id=orm_instance.bill_id,
        user_id=orm_instance.user_id,
        description=orm_instance.description,
        amount=orm_instance.amount,
        category_id=orm_instance.category_id,
        due_date=orm_instance.due_date,
        status=domain.BillStatus(orm_instance.status),
        series_id=orm_instance.series_id,
    )


ORM_MODELS: dict[domain.EntityKind, type[Base]] = {
    domain.EntityKind.USERS: ORMUser,
    domain.EntityKind.CATEGORIES: ORMCategory,
    domain.EntityKind.TRANSACTIONS: ORMTransaction,
    domain.EntityKind.SCHEDULED_BILLS: ORMScheduledBill,
    domain.EntityKind.SCHEDULED_BILL_INSTANCES: ORMScheduledBillInstance,
}

TO_DOMAIN: dict[domain.EntityKind, Callable[[Any], Entity]] = {
    domain.EntityKind.USERS: user_to_domain,
    domain.EntityKind.CATEGORIES: category_to_domain,
    domain.EntityKind.TRANSACTIONS: transaction_to_domain,
    domain.EntityKind.SCHEDULED_BILLS: scheduled_bill_to_domain,
    domain.EntityKind.SCHEDULED_BILL_INSTANCES: scheduled_bill_instance_to_domain,
}


def column_value(value: Any) -> Any:
    """Convert a domain value to what the column stores."""
    if isinstance(value, Enum):
        return value.value
    return value


def domain_to_columns(entity: Entity) -> dict[str, Any]:
    """Convert a domain entity to keyword arguments for its ORM model."""
    return {name: column_value(value) for name, value in entity_to_record(entity).items()}
