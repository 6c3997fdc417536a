"""Transaction domain service."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog

from pockettrack.database.base import RecordStore
from pockettrack.domain.entities import (
    Category,
    DayOverflow,
    EntityKind,
    SeriesScope,
    Transaction as TransactionEntity,
    TransactionType,
)
from pockettrack.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    category_type_mismatch,
    required_field,
    transaction_not_found,
)
from pockettrack.domain.series import classify, expand_monthly
from pockettrack.utils.amount_parser import has_cent_precision
from pockettrack.utils.ids import new_series_id

logger = structlog.get_logger(__name__)


def check_amount(amount: Decimal) -> None:
    """Raise ValidationError unless amount is positive whole cents."""
    if amount <= 0:
        raise ValidationError(f"Amount must be greater than zero, got {amount}")
    if not has_cent_precision(amount):
        raise ValidationError(f"Amount must have at most two decimal places, got {amount}")


@dataclass(frozen=True)
class TransactionChanges:
    """Fields to change on an existing transaction. None means unchanged.

    ``type``, ``amount``, ``description`` and ``category_id`` propagate across
    a series; ``date`` only applies to a single record.
    """

    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    date: "Optional[date]" = None

    def as_fields(self) -> dict[str, Any]:
        fields = {
            "type": self.type,
            "amount": self.amount,
            "description": self.description,
            "category_id": self.category_id,
            "date": self.date,
        }
        return {name: value for name, value in fields.items() if value is not None}


class TransactionService:
    """Service for managing transactions and recurring transaction series."""

    def __init__(self, db: RecordStore, overflow: DayOverflow = DayOverflow.CLAMP):
        """Initialize transaction service.

        Args:
            db: Record store instance
            overflow: Day-of-month policy for recurring series dates
        """
        self.db = db
        self.overflow = overflow

    def create_transaction(
        self,
        user_id: str,
        type: TransactionType,
        amount: Decimal,
        description: str,
        category_id: str,
        date: date,
        recurring_months: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """Create a transaction, or a whole recurring series.

        With ``recurring_months`` set, one transaction per month is created
        starting at ``date``, all sharing a fresh ``recurring_series_id``.
        Members are written one at a time; a failure part way leaves the
        members written so far in place.

        Args:
            user_id: Owner of the transaction
            type: Income or expense
            amount: Positive amount
            description: Description text
            category_id: Category ID of the user, of the same type
            date: Transaction date (first member's date for a series)
            recurring_months: Number of monthly members, or None for a single entry

        Returns:
            Created transaction entities in date order

        Raises:
            ValidationError: If a required field is missing or invalid
        """
        type = self._validate_fields(user_id, type, amount, description, category_id)
        if date is None:
            raise ValidationError(required_field("date"))

        template = {
            "user_id": user_id,
            "type": type,
            "amount": amount,
            "description": description,
            "category_id": category_id,
        }

        if recurring_months is None:
            entity = self.db.insert(EntityKind.TRANSACTIONS, {**template, "date": date})
            return [entity]

        dates = expand_monthly(date, recurring_months, overflow=self.overflow)
        series_id = new_series_id()
        created = [
            self.db.insert(
                EntityKind.TRANSACTIONS,
                {
                    **template,
                    "date": member_date,
                    "is_recurring": True,
                    "recurring_months": recurring_months,
                    "recurring_series_id": series_id,
                },
            )
            for member_date in dates
        ]
        logger.info("series_expanded", series_id=series_id, count=len(created), first=str(date))
        return created

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get(EntityKind.TRANSACTIONS, transaction_id)

    def require_transaction(self, transaction_id: str) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def requires_scope(self, transaction: TransactionEntity) -> bool:
        """Return True if edits and deletes of this transaction need a scope."""
        return transaction.is_recurring and transaction.recurring_series_id is not None

    def list_series(self, series_id: str) -> list[TransactionEntity]:
        """List the members of a recurring series in date order."""
        members = self.db.query_by_field(EntityKind.TRANSACTIONS, "recurring_series_id", series_id)
        return sorted(members, key=lambda t: t.date)

    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TransactionEntity]:
        """List a user's transactions, newest first.

        Args:
            user_id: Owner of the transactions
            start_date: Optional inclusive start date filter
            end_date: Optional inclusive end date filter

        Returns:
            List of transaction entities
        """
        transactions = [
            txn
            for txn in self.db.query_by_field(EntityKind.TRANSACTIONS, "user_id", user_id)
            if (start_date is None or txn.date >= start_date)
            and (end_date is None or txn.date <= end_date)
        ]
        return sorted(transactions, key=lambda t: t.date, reverse=True)

    def update_transaction(
        self,
        transaction_id: str,
        changes: TransactionChanges,
        scope: Optional[SeriesScope] = None,
    ) -> list[TransactionEntity]:
        """Apply changes to a transaction and, depending on scope, its series.

        Non-recurring transactions are updated directly and ``scope`` is
        ignored. For a recurring transaction a scope is required; without one
        nothing is written and an empty list is returned.

        Args:
            transaction_id: The anchor transaction the user acted on
            changes: Fields to change
            scope: SINGLE, FUTURE or ALL

        Returns:
            The updated transactions as stored after the update

        Raises:
            NotFoundError: If the anchor does not exist
            ValidationError: If the changes are invalid, or a date change is
                combined with a FUTURE or ALL scope
        """
        anchor = self.require_transaction(transaction_id)
        fields = changes.as_fields()
        self._validate_changes(anchor, fields)

        if not self.requires_scope(anchor):
            scope = SeriesScope.SINGLE
        elif scope is None:
            logger.info("scope_not_resolved", transaction_id=transaction_id, action="update")
            return []
        elif scope != SeriesScope.SINGLE and "date" in fields:
            raise ValidationError("A date change can only be applied to a single transaction")

        targets = self._targets(anchor, scope)
        for txn in targets:
            self.db.update(EntityKind.TRANSACTIONS, txn.id, fields)
        logger.info(
            "series_mutated",
            action="update",
            scope=SeriesScope(scope).value,
            anchor=transaction_id,
            count=len(targets),
        )
        return [self.db.get(EntityKind.TRANSACTIONS, txn.id) for txn in targets]

    def delete_transaction(
        self, transaction_id: str, scope: Optional[SeriesScope] = None
    ) -> list[str]:
        """Delete a transaction and, depending on scope, its series.

        Non-recurring transactions are deleted directly. For a recurring
        transaction without a scope nothing is deleted.

        Args:
            transaction_id: The anchor transaction the user acted on
            scope: SINGLE, FUTURE or ALL

        Returns:
            IDs of deleted transactions

        Raises:
            NotFoundError: If the anchor does not exist
        """
        anchor = self.require_transaction(transaction_id)

        if not self.requires_scope(anchor):
            scope = SeriesScope.SINGLE
        elif scope is None:
            logger.info("scope_not_resolved", transaction_id=transaction_id, action="delete")
            return []

        targets = self._targets(anchor, scope)
        for txn in targets:
            self.db.delete(EntityKind.TRANSACTIONS, txn.id)
        logger.info(
            "series_mutated",
            action="delete",
            scope=SeriesScope(scope).value,
            anchor=transaction_id,
            count=len(targets),
        )
        return [txn.id for txn in targets]

    def _targets(self, anchor: TransactionEntity, scope: SeriesScope) -> list[TransactionEntity]:
        scope = SeriesScope(scope)
        if scope == SeriesScope.SINGLE:
            return [anchor]
        members = self.db.query_by_field(
            EntityKind.TRANSACTIONS, "recurring_series_id", anchor.recurring_series_id
        )
        return classify(scope, anchor, members)

    def _validate_fields(
        self,
        user_id: str,
        type: Any,
        amount: Optional[Decimal],
        description: Optional[str],
        category_id: Optional[str],
    ) -> TransactionType:
        for name, value in (
            ("user_id", user_id),
            ("type", type),
            ("amount", amount),
            ("description", description),
            ("category_id", category_id),
        ):
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(required_field(name))
        try:
            type = TransactionType(type)
        except ValueError:
            raise ValidationError(f"Unknown transaction type '{type}'")
        check_amount(amount)
        self._check_category(user_id, category_id, type)
        return type

    def _validate_changes(self, anchor: TransactionEntity, fields: dict[str, Any]) -> None:
        if "type" in fields:
            try:
                fields["type"] = TransactionType(fields["type"])
            except ValueError:
                raise ValidationError(f"Unknown transaction type '{fields['type']}'")
        if "amount" in fields:
            check_amount(fields["amount"])
        if "description" in fields and not fields["description"].strip():
            raise ValidationError(required_field("description"))
        type = fields.get("type", anchor.type)
        if "category_id" in fields:
            self._check_category(anchor.user_id, fields["category_id"], type)
        elif "type" in fields:
            # A dangling category has no type to disagree with
            current = self.db.get(EntityKind.CATEGORIES, anchor.category_id)
            if current is not None:
                self._check_category_type(current, type)

    def _check_category(self, user_id: str, category_id: str, type: TransactionType) -> None:
        category = self.db.get(EntityKind.CATEGORIES, category_id)
        if category is None or category.user_id != user_id:
            raise ValidationError(category_not_found(category_id))
        self._check_category_type(category, type)

    def _check_category_type(self, category: Category, type: TransactionType) -> None:
        if category.type != type:
            raise ValidationError(
                category_type_mismatch(category.name, category.type.value, TransactionType(type).value)
            )
