"""Domain model entities for pockettrack.

These are pure data classes representing business concepts, independent of
how a record store persists them. Stores hand these out; services never see
raw rows or document dicts.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class EntityKind(str, Enum):
    """Record collections held by a record store."""

    USERS = "users"
    CATEGORIES = "categories"
    TRANSACTIONS = "transactions"
    SCHEDULED_BILLS = "scheduled_bills"
    SCHEDULED_BILL_INSTANCES = "scheduled_bill_instances"


class TransactionType(str, Enum):
    """Direction of money for transactions and categories."""

    INCOME = "income"
    EXPENSE = "expense"


class BillStatus(str, Enum):
    """Payment status of a scheduled bill instance."""

    PENDING = "pending"
    PAID = "paid"


class SeriesScope(str, Enum):
    """Breadth of an edit or delete across a recurring transaction series."""

    SINGLE = "single"
    FUTURE = "future"
    ALL = "all"


class BillInstanceScope(str, Enum):
    """Breadth of a delete across a scheduled bill series."""

    SINGLE = "single"
    SERIES = "series"


class DayOverflow(str, Enum):
    """What to do when a day of month does not exist in the target month.

    CLAMP moves the date to the month's last day (2024-02-31 -> 2024-02-29).
    ROLL_OVER carries the surplus days into the next month (-> 2024-03-02).
    """

    CLAMP = "clamp"
    ROLL_OVER = "roll-over"


@dataclass(frozen=True)
class User:
    """Local user record."""

    id: str
    name: str
    email: str
    is_guest: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Per-user income or expense category."""

    id: str
    user_id: str
    name: str
    type: TransactionType


@dataclass(frozen=True)
class Transaction:
    """Ledger entry, optionally a member of a recurring series."""

    id: str
    user_id: str
    type: TransactionType
    amount: Decimal
    description: str
    category_id: str
    date: date
    is_recurring: bool = False
    recurring_months: Optional[int] = None
    recurring_series_id: Optional[str] = None

    @property
    def series_id(self) -> Optional[str]:
        return self.recurring_series_id


@dataclass(frozen=True)
class ScheduledBill:
    """Recurring bill definition owning a series of instances."""

    id: str
    user_id: str
    description: str
    amount: Decimal
    category_id: str
    due_day: int
    recurring_months: int
    start_date: date
    series_id: str


@dataclass(frozen=True)
class ScheduledBillInstance:
    """One dated occurrence of a scheduled bill."""

    id: str
    bill_id: str
    user_id: str
    description: str
    amount: Decimal
    category_id: str
    due_date: date
    status: BillStatus
    series_id: str

    @property
    def date(self) -> date:
        return self.due_date


@dataclass(frozen=True)
class CategoryTotal:
    """Expense total for one category within a period."""

    category_id: Optional[str]
    category_name: str
    total: Decimal
    count: int


@dataclass(frozen=True)
class MonthlySummary:
    """Aggregated view of one calendar month for a user."""

    year: int
    month: int
    income: Decimal
    expenses: Decimal
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    scheduled: tuple[ScheduledBillInstance, ...] = field(default_factory=tuple)
    expenses_by_category: tuple[CategoryTotal, ...] = field(default_factory=tuple)

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses
