"""Tests for the transaction domain service and its series semantics."""

import pytest
from datetime import date
from decimal import Decimal

from pockettrack.domain.entities import SeriesScope, TransactionType
from pockettrack.domain.errors import NotFoundError, ValidationError
from pockettrack.domain.transaction import TransactionChanges, TransactionService


@pytest.fixture
def food(sample_categories):
    return sample_categories["Food"]


@pytest.fixture
def rent_series(transaction_service, sample_user, sample_categories):
    """Three monthly 100.00 expenses from 2024-01-15."""
    return transaction_service.create_transaction(
        user_id=sample_user.id,
        type=TransactionType.EXPENSE,
        amount=Decimal("100"),
        description="Rent",
        category_id=sample_categories["Housing"].id,
        date=date(2024, 1, 15),
        recurring_months=3,
    )


def _amounts(service, series_id):
    return [t.amount for t in service.list_series(series_id)]


class TestCreateTransaction:
    """Tests for creating single and recurring transactions."""

    def test_single(self, transaction_service, sample_user, food):
        created = transaction_service.create_transaction(
            user_id=sample_user.id,
            type=TransactionType.EXPENSE,
            amount=Decimal("12.50"),
            description="Lunch",
            category_id=food.id,
            date=date(2024, 2, 1),
        )

        assert len(created) == 1
        assert created[0].is_recurring is False
        assert created[0].recurring_series_id is None
        assert transaction_service.get_transaction(created[0].id) == created[0]

    def test_recurring_expansion(self, rent_series):
        """Three members one month apart sharing one series id."""
        assert [t.date for t in rent_series] == [date(2024, 1, 15), date(2024, 2, 15), date(2024, 3, 15)]
        assert len({t.recurring_series_id for t in rent_series}) == 1
        assert rent_series[0].recurring_series_id.startswith("series-")
        assert all(t.amount == Decimal("100") for t in rent_series)
        assert all(t.is_recurring and t.recurring_months == 3 for t in rent_series)

    def test_separate_series_get_distinct_ids(self, transaction_service, sample_user, food, rent_series):
        other = transaction_service.create_transaction(
            user_id=sample_user.id,
            type=TransactionType.EXPENSE,
            amount=Decimal("30"),
            description="Gym",
            category_id=food.id,
            date=date(2024, 1, 1),
            recurring_months=2,
        )
        assert other[0].recurring_series_id != rent_series[0].recurring_series_id

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"description": "  "}, "description"),
            ({"amount": Decimal("0")}, "greater than zero"),
            ({"amount": Decimal("-5")}, "greater than zero"),
            ({"amount": Decimal("0.001")}, "two decimal places"),
            ({"type": TransactionType.INCOME}, "expense category, not income"),
            ({"category_id": "cat-unknown"}, "not found"),
            ({"type": "transfer"}, "Unknown transaction type"),
            ({"recurring_months": 0}, "positive integer"),
        ],
    )
    def test_validation(self, transaction_service, temp_db, sample_user, food, overrides, message):
        kwargs = {
            "user_id": sample_user.id,
            "type": TransactionType.EXPENSE,
            "amount": Decimal("10"),
            "description": "Snack",
            "category_id": food.id,
            "date": date(2024, 1, 1),
        }
        kwargs.update(overrides)

        with pytest.raises(ValidationError, match=message):
            transaction_service.create_transaction(**kwargs)
        assert transaction_service.list_transactions(sample_user.id) == []

    def test_category_of_other_user_rejected(self, transaction_service, user_service, sample_user):
        other = user_service.create_user(name="Other", email="other@example.com")
        foreign = user_service.categories.list_categories(other.id)[0]

        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                user_id=sample_user.id,
                type=foreign.type,
                amount=Decimal("1"),
                description="x",
                category_id=foreign.id,
                date=date(2024, 1, 1),
            )

    def test_roll_over_policy(self, temp_db, sample_user, food):
        service = TransactionService(temp_db, overflow="roll-over")
        created = service.create_transaction(
            user_id=sample_user.id,
            type=TransactionType.EXPENSE,
            amount=Decimal("10"),
            description="Subscription",
            category_id=food.id,
            date=date(2024, 1, 31),
            recurring_months=2,
        )
        assert [t.date for t in created] == [date(2024, 1, 31), date(2024, 3, 2)]


class TestUpdateTransaction:
    """Tests for scoped updates."""

    def test_future_scope(self, transaction_service, rent_series):
        """Editing February with scope future: January 100, February and March 150."""
        updated = transaction_service.update_transaction(
            rent_series[1].id, TransactionChanges(amount=Decimal("150")), SeriesScope.FUTURE
        )

        assert [t.id for t in updated] == [rent_series[1].id, rent_series[2].id]
        series_id = rent_series[0].recurring_series_id
        assert _amounts(transaction_service, series_id) == [Decimal("100"), Decimal("150"), Decimal("150")]

    def test_single_scope(self, transaction_service, rent_series):
        transaction_service.update_transaction(
            rent_series[1].id, TransactionChanges(description="Rent (late)"), SeriesScope.SINGLE
        )

        members = transaction_service.list_series(rent_series[0].recurring_series_id)
        assert [t.description for t in members] == ["Rent", "Rent (late)", "Rent"]

    def test_all_scope(self, transaction_service, rent_series, sample_categories):
        health = sample_categories["Health"]
        transaction_service.update_transaction(
            rent_series[2].id,
            TransactionChanges(amount=Decimal("80"), category_id=health.id),
            SeriesScope.ALL,
        )

        members = transaction_service.list_series(rent_series[0].recurring_series_id)
        assert all(t.amount == Decimal("80") and t.category_id == health.id for t in members)
        assert [t.date for t in members] == [t.date for t in rent_series]

    def test_missing_scope_changes_nothing(self, transaction_service, rent_series):
        updated = transaction_service.update_transaction(
            rent_series[0].id, TransactionChanges(amount=Decimal("1"))
        )

        assert updated == []
        assert _amounts(transaction_service, rent_series[0].recurring_series_id) == [Decimal("100")] * 3

    def test_date_change_only_for_single(self, transaction_service, rent_series):
        with pytest.raises(ValidationError, match="single"):
            transaction_service.update_transaction(
                rent_series[0].id, TransactionChanges(date=date(2024, 1, 20)), SeriesScope.ALL
            )

        moved = transaction_service.update_transaction(
            rent_series[0].id, TransactionChanges(date=date(2024, 1, 20)), SeriesScope.SINGLE
        )
        assert moved[0].date == date(2024, 1, 20)

    def test_non_recurring_ignores_scope(self, transaction_service, sample_user, food):
        txn = transaction_service.create_transaction(
            user_id=sample_user.id,
            type=TransactionType.EXPENSE,
            amount=Decimal("5"),
            description="Bread",
            category_id=food.id,
            date=date(2024, 1, 3),
        )[0]

        updated = transaction_service.update_transaction(txn.id, TransactionChanges(amount=Decimal("6")))

        assert updated[0].amount == Decimal("6")

    def test_invalid_change(self, transaction_service, rent_series):
        with pytest.raises(ValidationError):
            transaction_service.update_transaction(
                rent_series[0].id, TransactionChanges(amount=Decimal("-1")), SeriesScope.ALL
            )

    def test_type_change_must_match_category(self, transaction_service, rent_series):
        with pytest.raises(ValidationError, match="expense category, not income"):
            transaction_service.update_transaction(
                rent_series[0].id, TransactionChanges(type=TransactionType.INCOME), SeriesScope.ALL
            )

        members = transaction_service.list_series(rent_series[0].recurring_series_id)
        assert all(t.type == TransactionType.EXPENSE for t in members)

    def test_type_change_with_matching_category(self, transaction_service, rent_series, sample_categories):
        salary = sample_categories["Salary"]
        transaction_service.update_transaction(
            rent_series[0].id,
            TransactionChanges(type=TransactionType.INCOME, category_id=salary.id),
            SeriesScope.ALL,
        )

        members = transaction_service.list_series(rent_series[0].recurring_series_id)
        assert all(t.type == TransactionType.INCOME and t.category_id == salary.id for t in members)

    def test_category_change_must_match_type(self, transaction_service, rent_series, sample_categories):
        with pytest.raises(ValidationError, match="income category, not expense"):
            transaction_service.update_transaction(
                rent_series[1].id,
                TransactionChanges(category_id=sample_categories["Salary"].id),
                SeriesScope.SINGLE,
            )

    def test_future_selects_by_current_date(self, transaction_service, rent_series):
        """After single-scope date moves, future follows the stored dates, not series order."""
        first, second, third = rent_series
        transaction_service.update_transaction(
            first.id, TransactionChanges(date=date(2024, 4, 1)), SeriesScope.SINGLE
        )
        transaction_service.update_transaction(
            third.id, TransactionChanges(date=date(2024, 2, 1)), SeriesScope.SINGLE
        )

        updated = transaction_service.update_transaction(
            second.id, TransactionChanges(amount=Decimal("150")), SeriesScope.FUTURE
        )

        assert {t.id for t in updated} == {first.id, second.id}
        amounts = {t.id: t.amount for t in transaction_service.list_series(first.recurring_series_id)}
        assert amounts == {first.id: Decimal("150"), second.id: Decimal("150"), third.id: Decimal("100")}

    def test_missing_anchor(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.update_transaction("trans-missing", TransactionChanges(amount=Decimal("1")))


class TestDeleteTransaction:
    """Tests for scoped deletes."""

    def test_future_scope(self, transaction_service, rent_series):
        deleted = transaction_service.delete_transaction(rent_series[1].id, SeriesScope.FUTURE)

        assert deleted == [rent_series[1].id, rent_series[2].id]
        remaining = transaction_service.list_series(rent_series[0].recurring_series_id)
        assert [t.id for t in remaining] == [rent_series[0].id]

    def test_all_scope(self, transaction_service, rent_series):
        transaction_service.delete_transaction(rent_series[1].id, SeriesScope.ALL)
        assert transaction_service.list_series(rent_series[0].recurring_series_id) == []

    def test_single_scope(self, transaction_service, rent_series):
        transaction_service.delete_transaction(rent_series[0].id, SeriesScope.SINGLE)
        remaining = transaction_service.list_series(rent_series[0].recurring_series_id)
        assert [t.id for t in remaining] == [rent_series[1].id, rent_series[2].id]

    def test_missing_scope_deletes_nothing(self, transaction_service, rent_series):
        assert transaction_service.delete_transaction(rent_series[0].id) == []
        assert len(transaction_service.list_series(rent_series[0].recurring_series_id)) == 3

    def test_other_series_untouched(self, transaction_service, sample_user, food, rent_series):
        other = transaction_service.create_transaction(
            user_id=sample_user.id,
            type=TransactionType.EXPENSE,
            amount=Decimal("20"),
            description="Streaming",
            category_id=food.id,
            date=date(2024, 1, 15),
            recurring_months=3,
        )

        transaction_service.delete_transaction(rent_series[0].id, SeriesScope.ALL)

        assert len(transaction_service.list_series(other[0].recurring_series_id)) == 3

    def test_deleted_anchor_raises(self, transaction_service, rent_series):
        transaction_service.delete_transaction(rent_series[0].id, SeriesScope.SINGLE)
        with pytest.raises(NotFoundError):
            transaction_service.delete_transaction(rent_series[0].id, SeriesScope.SINGLE)


def test_list_transactions_newest_first(transaction_service, sample_user, rent_series):
    listed = transaction_service.list_transactions(
        sample_user.id, start_date=date(2024, 2, 1), end_date=date(2024, 3, 31)
    )
    assert [t.date for t in listed] == [date(2024, 3, 15), date(2024, 2, 15)]
