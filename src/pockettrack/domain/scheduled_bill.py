"""Scheduled bill domain service."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import structlog

from pockettrack.database.base import RecordStore
from pockettrack.domain.entities import (
    BillInstanceScope,
    BillStatus,
    DayOverflow,
    EntityKind,
    ScheduledBill,
    ScheduledBillInstance,
    TransactionType,
)
from pockettrack.domain.errors import (
    NotFoundError,
    ValidationError,
    bill_instance_not_found,
    category_not_found,
    category_type_mismatch,
    required_field,
)
from pockettrack.domain.series import classify, expand_monthly
from pockettrack.domain.transaction import check_amount
from pockettrack.utils.date_parser import month_bounds
from pockettrack.utils.ids import new_series_id

logger = structlog.get_logger(__name__)


class ScheduledBillService:
    """Service for scheduled bills and their dated instances."""

    def __init__(self, db: RecordStore, overflow: DayOverflow = DayOverflow.CLAMP):
        """Initialize scheduled bill service.

        Args:
            db: Record store instance
            overflow: Day-of-month policy for instance due dates
        """
        self.db = db
        self.overflow = overflow

    def create_bill(
        self,
        user_id: str,
        description: str,
        amount: Decimal,
        category_id: str,
        due_day: int,
        recurring_months: int,
        start_date: date,
    ) -> ScheduledBill:
        """Create a bill definition and one pending instance per month.

        The first instance falls in ``start_date``'s month on ``due_day``;
        each following instance is one month later. The definition is written
        first, then each instance on its own.

        Args:
            user_id: Owner of the bill
            description: Bill description
            amount: Positive amount
            category_id: Expense category ID of the user
            due_day: Day of month the bill is due (1-31)
            recurring_months: Number of instances, at least 1
            start_date: Month the schedule starts in

        Returns:
            The bill definition

        Raises:
            ValidationError: If a field is missing or invalid
        """
        for name, value in (
            ("user_id", user_id),
            ("description", description),
            ("amount", amount),
            ("category_id", category_id),
            ("due_day", due_day),
            ("recurring_months", recurring_months),
            ("start_date", start_date),
        ):
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(required_field(name))
        check_amount(amount)
        category = self.db.get(EntityKind.CATEGORIES, category_id)
        if category is None or category.user_id != user_id:
            raise ValidationError(category_not_found(category_id))
        if category.type != TransactionType.EXPENSE:
            raise ValidationError(
                category_type_mismatch(category.name, category.type.value, TransactionType.EXPENSE.value)
            )

        # Validates due_day and recurring_months before anything is written
        due_dates = expand_monthly(start_date, recurring_months, day=due_day, overflow=self.overflow)

        series_id = new_series_id()
        bill = self.db.insert(
            EntityKind.SCHEDULED_BILLS,
            {
                "user_id": user_id,
                "description": description,
                "amount": amount,
                "category_id": category_id,
                "due_day": due_day,
                "recurring_months": recurring_months,
                "start_date": start_date,
                "series_id": series_id,
            },
        )
        for due_date in due_dates:
            self.db.insert(
                EntityKind.SCHEDULED_BILL_INSTANCES,
                {
                    "bill_id": bill.id,
                    "user_id": user_id,
                    "description": description,
                    "amount": amount,
                    "category_id": category_id,
                    "due_date": due_date,
                    "status": BillStatus.PENDING,
                    "series_id": series_id,
                },
            )
        logger.info("bill_created", bill_id=bill.id, series_id=series_id, count=len(due_dates))
        return bill

    def get_bill(self, bill_id: str) -> Optional[ScheduledBill]:
        """Get a bill definition by ID."""
        return self.db.get(EntityKind.SCHEDULED_BILLS, bill_id)

    def get_instance(self, instance_id: str) -> Optional[ScheduledBillInstance]:
        """Get a bill instance by ID."""
        return self.db.get(EntityKind.SCHEDULED_BILL_INSTANCES, instance_id)

    def require_instance(self, instance_id: str) -> ScheduledBillInstance:
        """Get a bill instance by ID or raise NotFoundError."""
        instance = self.get_instance(instance_id)
        if instance is None:
            raise NotFoundError(bill_instance_not_found(instance_id))
        return instance

    def list_bills(self, user_id: str) -> list[ScheduledBill]:
        """List a user's bill definitions."""
        return self.db.query_by_field(EntityKind.SCHEDULED_BILLS, "user_id", user_id)

    def list_instances(
        self, user_id: str, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[ScheduledBillInstance]:
        """List a user's bill instances sorted by due date.

        Args:
            user_id: Owner of the instances
            year: Optional year; with month, restricts to that calendar month
            month: Optional month (1-12)
        """
        instances = self.db.query_by_field(EntityKind.SCHEDULED_BILL_INSTANCES, "user_id", user_id)
        if year is not None and month is not None:
            first, last = month_bounds(year, month)
            instances = [i for i in instances if first <= i.due_date <= last]
        return sorted(instances, key=lambda i: i.due_date)

    def list_series_instances(self, series_id: str) -> list[ScheduledBillInstance]:
        """List the instances of a bill series sorted by due date."""
        instances = self.db.query_by_field(EntityKind.SCHEDULED_BILL_INSTANCES, "series_id", series_id)
        return sorted(instances, key=lambda i: i.due_date)

    def mark_paid(self, instance_id: str) -> ScheduledBillInstance:
        """Mark one instance as paid. Already paid instances are left as they are.

        Raises:
            NotFoundError: If the instance does not exist
        """
        instance = self.require_instance(instance_id)
        if instance.status == BillStatus.PAID:
            return instance
        self.db.update(EntityKind.SCHEDULED_BILL_INSTANCES, instance_id, {"status": BillStatus.PAID})
        return self.require_instance(instance_id)

    def rename_instance(self, instance_id: str, description: str) -> ScheduledBillInstance:
        """Change the description of one instance.

        An empty or unchanged description leaves the instance untouched.

        Raises:
            NotFoundError: If the instance does not exist
        """
        instance = self.require_instance(instance_id)
        if not description or not description.strip() or description == instance.description:
            return instance
        self.db.update(
            EntityKind.SCHEDULED_BILL_INSTANCES, instance_id, {"description": description}
        )
        return self.require_instance(instance_id)

    def delete_instance(
        self, instance_id: str, scope: Optional[BillInstanceScope] = None
    ) -> list[str]:
        """Delete one instance or its whole series.

        Without a scope nothing is deleted.

        Args:
            instance_id: The anchor instance the user acted on
            scope: SINGLE for this instance only, SERIES for every instance
                of the series and its bill definition

        Returns:
            IDs of deleted instances

        Raises:
            NotFoundError: If the instance does not exist
        """
        anchor = self.require_instance(instance_id)
        if scope is None:
            logger.info("scope_not_resolved", instance_id=instance_id, action="delete")
            return []

        scope = BillInstanceScope(scope)
        members = self.db.query_by_field(
            EntityKind.SCHEDULED_BILL_INSTANCES, "series_id", anchor.series_id
        )
        targets = classify(scope, anchor, members)
        for instance in targets:
            self.db.delete(EntityKind.SCHEDULED_BILL_INSTANCES, instance.id)
        if scope == BillInstanceScope.SERIES:
            self._delete_definitions(anchor.series_id)
        logger.info(
            "series_mutated",
            action="delete",
            scope=scope.value,
            anchor=instance_id,
            count=len(targets),
        )
        return [instance.id for instance in targets]

    def delete_series(self, series_id: str) -> list[str]:
        """Delete every instance and bill definition carrying series_id.

        Returns:
            IDs of deleted instances
        """
        instances = self.db.query_by_field(EntityKind.SCHEDULED_BILL_INSTANCES, "series_id", series_id)
        for instance in instances:
            self.db.delete(EntityKind.SCHEDULED_BILL_INSTANCES, instance.id)
        self._delete_definitions(series_id)
        logger.info("series_deleted", series_id=series_id, count=len(instances))
        return [instance.id for instance in instances]

    def upcoming(self, user_id: str, today: date, days: int = 5) -> list[ScheduledBillInstance]:
        """List pending instances due between today and today + days, inclusive."""
        horizon = today + timedelta(days=days)
        return [
            instance
            for instance in self.list_instances(user_id)
            if instance.status == BillStatus.PENDING and today <= instance.due_date <= horizon
        ]

    def _delete_definitions(self, series_id: str) -> None:
        for bill in self.db.query_by_field(EntityKind.SCHEDULED_BILLS, "series_id", series_id):
            self.db.delete(EntityKind.SCHEDULED_BILLS, bill.id)
