"""Monthly option expiry dates.

U.S.-listed equity options expire on the third Friday of the month.
"""

from __future__ import annotations
import math
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

FRIDAY = 4  # date.weekday()

DateLike = Union[date, datetime]


def third_friday(year: int, month: int) -> date:
    """Third Friday of ``year``/``month``."""
    first = date(year, month, 1)
    offset = (FRIDAY - first.weekday()) % 7
    return first + timedelta(days=offset + 14)


def next_monthly_expiry(reference: Optional[DateLike] = None) -> date:
    """Third Friday of the calendar month after ``reference`` (default: now)."""
    if reference is None:
        reference = datetime.now()
    year, month = reference.year, reference.month + 1
    if month > 12:
        year, month = year + 1, 1
    return third_friday(year, month)


def days_to_expiry(expiry: date, reference: Optional[DateLike] = None) -> int:
    """Whole days from ``reference`` until midnight of ``expiry``, rounded up.

    A plain ``date`` reference counts from its midnight; a ``datetime``
    keeps its time of day, so part of a day counts as one.
    """
    if reference is None:
        reference = datetime.now()
    if not isinstance(reference, datetime):
        reference = datetime.combine(reference, time())
    delta = datetime.combine(expiry, time()) - reference.replace(tzinfo=None)
    return math.ceil(delta.total_seconds() / 86400)
