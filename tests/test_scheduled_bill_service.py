"""Tests for scheduled bills and their instances."""

import pytest
from datetime import date
from decimal import Decimal

from pockettrack.domain.entities import BillInstanceScope, BillStatus, DayOverflow, EntityKind
from pockettrack.domain.errors import NotFoundError, ValidationError
from pockettrack.domain.scheduled_bill import ScheduledBillService


@pytest.fixture
def bills_category(sample_categories):
    return sample_categories["Bills"]


@pytest.fixture
def internet(bill_service, sample_user, bills_category):
    """Internet bill due on the 10th for three months from January 2024."""
    return bill_service.create_bill(
        user_id=sample_user.id,
        description="Internet",
        amount=Decimal("99.90"),
        category_id=bills_category.id,
        due_day=10,
        recurring_months=3,
        start_date=date(2024, 1, 1),
    )


class TestCreateBill:
    """Tests for creating bills."""

    def test_instances_created(self, bill_service, internet):
        instances = bill_service.list_series_instances(internet.series_id)

        assert [i.due_date for i in instances] == [date(2024, 1, 10), date(2024, 2, 10), date(2024, 3, 10)]
        assert all(i.status == BillStatus.PENDING for i in instances)
        assert all(i.bill_id == internet.id and i.series_id == internet.series_id for i in instances)
        assert all(i.amount == Decimal("99.90") for i in instances)

    @pytest.mark.parametrize(
        "overflow, expected",
        [
            (DayOverflow.CLAMP, [date(2024, 1, 31), date(2024, 2, 29)]),
            (DayOverflow.ROLL_OVER, [date(2024, 1, 31), date(2024, 3, 2)]),
        ],
    )
    def test_due_day_31(self, temp_db, sample_user, bills_category, overflow, expected):
        service = ScheduledBillService(temp_db, overflow=overflow)
        bill = service.create_bill(
            user_id=sample_user.id,
            description="Rent",
            amount=Decimal("1200"),
            category_id=bills_category.id,
            due_day=31,
            recurring_months=2,
            start_date=date(2024, 1, 1),
        )

        assert [i.due_date for i in service.list_series_instances(bill.series_id)] == expected

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"due_day": 0}, "Day of month"),
            ({"due_day": 32}, "Day of month"),
            ({"recurring_months": 0}, "positive integer"),
            ({"amount": Decimal("0")}, "greater than zero"),
            ({"amount": Decimal("9.999")}, "two decimal places"),
            ({"description": ""}, "description"),
            ({"category_id": "cat-missing"}, "not found"),
        ],
    )
    def test_validation_writes_nothing(
        self, bill_service, temp_db, sample_user, bills_category, overrides, message
    ):
        kwargs = {
            "user_id": sample_user.id,
            "description": "Water",
            "amount": Decimal("40"),
            "category_id": bills_category.id,
            "due_day": 5,
            "recurring_months": 2,
            "start_date": date(2024, 1, 1),
        }
        kwargs.update(overrides)

        with pytest.raises(ValidationError, match=message):
            bill_service.create_bill(**kwargs)
        assert temp_db.list_all(EntityKind.SCHEDULED_BILLS) == []
        assert temp_db.list_all(EntityKind.SCHEDULED_BILL_INSTANCES) == []

    def test_income_category_rejected(self, bill_service, temp_db, sample_user, sample_categories):
        with pytest.raises(ValidationError, match="income category, not expense"):
            bill_service.create_bill(
                user_id=sample_user.id,
                description="Water",
                amount=Decimal("40"),
                category_id=sample_categories["Salary"].id,
                due_day=5,
                recurring_months=2,
                start_date=date(2024, 1, 1),
            )
        assert temp_db.list_all(EntityKind.SCHEDULED_BILLS) == []


class TestInstanceOperations:
    """Tests for paying, renaming and deleting instances."""

    def test_mark_paid(self, bill_service, internet):
        first = bill_service.list_series_instances(internet.series_id)[0]

        paid = bill_service.mark_paid(first.id)
        again = bill_service.mark_paid(first.id)

        assert paid.status == BillStatus.PAID
        assert again == paid
        statuses = [i.status for i in bill_service.list_series_instances(internet.series_id)]
        assert statuses == [BillStatus.PAID, BillStatus.PENDING, BillStatus.PENDING]

    def test_rename_single_instance(self, bill_service, internet):
        instances = bill_service.list_series_instances(internet.series_id)

        bill_service.rename_instance(instances[1].id, "Fiber internet")

        names = [i.description for i in bill_service.list_series_instances(internet.series_id)]
        assert names == ["Internet", "Fiber internet", "Internet"]

    def test_rename_empty_is_noop(self, bill_service, internet):
        first = bill_service.list_series_instances(internet.series_id)[0]
        assert bill_service.rename_instance(first.id, "  ").description == "Internet"

    def test_delete_single(self, bill_service, internet):
        instances = bill_service.list_series_instances(internet.series_id)

        deleted = bill_service.delete_instance(instances[1].id, BillInstanceScope.SINGLE)

        assert deleted == [instances[1].id]
        remaining = bill_service.list_series_instances(internet.series_id)
        assert [i.id for i in remaining] == [instances[0].id, instances[2].id]
        assert bill_service.get_bill(internet.id) is not None

    def test_delete_series_removes_definition(self, bill_service, internet):
        instances = bill_service.list_series_instances(internet.series_id)

        deleted = bill_service.delete_instance(instances[2].id, BillInstanceScope.SERIES)

        assert sorted(deleted) == sorted(i.id for i in instances)
        assert bill_service.list_series_instances(internet.series_id) == []
        assert bill_service.get_bill(internet.id) is None

    def test_delete_without_scope_is_noop(self, bill_service, internet):
        first = bill_service.list_series_instances(internet.series_id)[0]
        assert bill_service.delete_instance(first.id) == []
        assert len(bill_service.list_series_instances(internet.series_id)) == 3

    def test_delete_series_by_id(self, bill_service, internet):
        deleted = bill_service.delete_series(internet.series_id)
        assert len(deleted) == 3
        assert bill_service.list_bills(internet.user_id) == []

    def test_missing_instance(self, bill_service):
        with pytest.raises(NotFoundError):
            bill_service.mark_paid("bill-inst-missing")


class TestListing:
    """Tests for listing instances."""

    def test_list_by_month(self, bill_service, sample_user, internet):
        february = bill_service.list_instances(sample_user.id, 2024, 2)
        assert [i.due_date for i in february] == [date(2024, 2, 10)]

    def test_upcoming_window(self, bill_service, sample_user, internet):
        instances = bill_service.list_series_instances(internet.series_id)
        bill_service.mark_paid(instances[1].id)

        assert [i.id for i in bill_service.upcoming(sample_user.id, date(2024, 1, 5))] == [instances[0].id]
        assert bill_service.upcoming(sample_user.id, date(2024, 1, 4)) == []
        assert [i.id for i in bill_service.upcoming(sample_user.id, date(2024, 1, 10))] == [instances[0].id]
        # Paid instances are not upcoming
        assert bill_service.upcoming(sample_user.id, date(2024, 2, 8)) == []
