"""Recurring series expansion and mutation scope classification.

Two pieces of pure logic shared by recurring transactions and scheduled
bills:

* ``expand_monthly`` turns a base date and a count into the dates of every
  member of a monthly series.
* ``classify`` decides which members of a series an edit or delete applies
  to, given the record the user acted on (the anchor) and a scope.

Neither function touches a record store.
"""

import calendar
from datetime import date, timedelta
from typing import Optional, Protocol, Sequence, TypeVar, Union

from dateutil.relativedelta import relativedelta

from pockettrack.domain.entities import BillInstanceScope, DayOverflow, SeriesScope
from pockettrack.domain.errors import ValidationError


class SeriesMember(Protocol):
    """Anything dated that belongs to a series."""

    @property
    def id(self) -> str: ...

    @property
    def date(self) -> date: ...

    @property
    def series_id(self) -> Optional[str]: ...


M = TypeVar("M", bound=SeriesMember)

Scope = Union[SeriesScope, BillInstanceScope]


def month_date(
    year: int, month: int, day: int, overflow: DayOverflow = DayOverflow.CLAMP
) -> date:
    """Build a date, resolving a day past the end of the month.

    Args:
        year: Calendar year
        month: Month (1-12)
        day: Requested day of month (1-31)
        overflow: Policy applied when the month is shorter than ``day``

    Returns:
        The resolved date
    """
    last_day = calendar.monthrange(year, month)[1]
    if day <= last_day:
        return date(year, month, day)
    if overflow == DayOverflow.ROLL_OVER:
        return date(year, month, last_day) + timedelta(days=day - last_day)
    return date(year, month, last_day)


def expand_monthly(
    base: date,
    count: int,
    day: Optional[int] = None,
    overflow: DayOverflow = DayOverflow.CLAMP,
) -> list[date]:
    """Expand a monthly recurrence into concrete dates.

    The i-th date (0-indexed) is ``base`` moved forward by i months with the
    day of month held at ``day``. Every date is derived from ``base`` rather
    than from its predecessor, so a short month never shifts the months after
    it.

    Args:
        base: Date of the first member; only its year and month are used when
            ``day`` is given
        count: Number of members, at least 1
        day: Day of month for every member (defaults to ``base.day``)
        overflow: Policy for days that do not exist in a target month

    Returns:
        ``count`` dates in ascending order

    Raises:
        ValidationError: If count is not positive or day is outside 1..31
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValidationError(f"Recurrence count must be a positive integer, got {count!r}")
    if day is None:
        day = base.day
    if not 1 <= day <= 31:
        raise ValidationError(f"Day of month must be between 1 and 31, got {day}")

    first_of_month = base.replace(day=1)
    dates = []
    for i in range(count):
        target = first_of_month + relativedelta(months=i)
        dates.append(month_date(target.year, target.month, day, overflow))
    return dates


def classify(scope: Scope, anchor: M, members: Sequence[M]) -> list[M]:
    """Select the series members an edit or delete applies to.

    Args:
        scope: SINGLE, FUTURE, ALL (transactions) or SERIES (bill instances)
        anchor: The record the user acted on
        members: Candidate records, normally every record of the anchor's series

    Returns:
        Members to mutate, in the order given. The anchor is always included,
        even when ``members`` does not contain it.
    """
    if scope in (SeriesScope.SINGLE, BillInstanceScope.SINGLE):
        return [anchor]

    siblings = [
        m for m in members if anchor.series_id is not None and m.series_id == anchor.series_id
    ]
    if scope == SeriesScope.FUTURE:
        selected = [m for m in siblings if m.date >= anchor.date]
    elif scope in (SeriesScope.ALL, BillInstanceScope.SERIES):
        selected = siblings
    else:
        raise ValidationError(f"Unknown scope: {scope!r}")

    if all(m.id != anchor.id for m in selected):
        selected.insert(0, anchor)
    return selected
