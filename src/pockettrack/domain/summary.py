"""Monthly summary domain service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from pockettrack.database.base import RecordStore
from pockettrack.domain.entities import (
    Category,
    CategoryTotal,
    EntityKind,
    MonthlySummary,
    ScheduledBillInstance,
    Transaction,
    TransactionType,
)
from pockettrack.domain.scheduled_bill import ScheduledBillService
from pockettrack.domain.transaction import TransactionService
from pockettrack.utils.date_parser import month_bounds

UNCATEGORIZED = "Uncategorized"


def expenses_by_category(
    transactions: Iterable[Transaction], categories: dict[str, Category]
) -> list[CategoryTotal]:
    """Total expense transactions per category, largest first.

    Args:
        transactions: Transactions to aggregate; income is ignored
        categories: Categories by ID, used for names

    Returns:
        One CategoryTotal per category with at least one expense
    """
    totals: dict[Optional[str], dict] = defaultdict(lambda: {"total": Decimal("0"), "count": 0})
    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        key = txn.category_id if txn.category_id in categories else None
        totals[key]["total"] += txn.amount
        totals[key]["count"] += 1

    results = [
        CategoryTotal(
            category_id=category_id,
            category_name=categories[category_id].name if category_id else UNCATEGORIZED,
            total=data["total"],
            count=data["count"],
        )
        for category_id, data in totals.items()
    ]
    return sorted(results, key=lambda r: (-r.total, r.category_name))


class SummaryService:
    """Service for building monthly summaries."""

    def __init__(self, db: RecordStore):
        """Initialize summary service.

        Args:
            db: Record store instance
        """
        self.db = db
        self.transactions = TransactionService(db)
        self.bills = ScheduledBillService(db)

    def category_index(self, user_id: str) -> dict[str, Category]:
        """Return the user's categories keyed by ID."""
        return {c.id: c for c in self.db.query_by_field(EntityKind.CATEGORIES, "user_id", user_id)}

    def monthly_summary(
        self, user_id: str, year: int, month: int, search: Optional[str] = None
    ) -> MonthlySummary:
        """Summarize one calendar month for a user.

        Args:
            user_id: Owner of the data
            year: Calendar year
            month: Month (1-12)
            search: Optional case-insensitive text matched against
                description or category name; narrows the listed
                transactions only, totals cover the whole month

        Returns:
            MonthlySummary for the month
        """
        first, last = month_bounds(year, month)
        categories = self.category_index(user_id)
        transactions = self.transactions.list_transactions(user_id, start_date=first, end_date=last)
        listed = filter_transactions(transactions, search, categories) if search else transactions

        income = sum(
            (t.amount for t in transactions if t.type == TransactionType.INCOME), Decimal("0")
        )
        expenses = sum(
            (t.amount for t in transactions if t.type == TransactionType.EXPENSE), Decimal("0")
        )
        return MonthlySummary(
            year=year,
            month=month,
            income=income,
            expenses=expenses,
            transactions=tuple(listed),
            scheduled=tuple(self.bills.list_instances(user_id, year, month)),
            expenses_by_category=tuple(expenses_by_category(transactions, categories)),
        )

    def upcoming_bills(
        self, user_id: str, today: date, days: int = 5
    ) -> list[ScheduledBillInstance]:
        """List pending bill instances due within the next days, today included."""
        return self.bills.upcoming(user_id, today, days)


def filter_transactions(
    transactions: Iterable[Transaction], search: str, categories: dict[str, Category]
) -> list[Transaction]:
    """Keep transactions whose description or category name contains search."""
    needle = search.strip().lower()
    result = []
    for txn in transactions:
        category = categories.get(txn.category_id)
        category_name = category.name.lower() if category else ""
        if needle in txn.description.lower() or needle in category_name:
            result.append(txn)
    return result
