from __future__ import annotations

from datetime import date

from hypothesis import given, settings
from hypothesis import strategies as st

from expense_tracker.summaries import WINDOW_MONTHS, month_start, shift_months, trailing_window

DAYS = st.dates(min_value=date(1990, 1, 1), max_value=date(2200, 12, 31))


@settings(max_examples=100, deadline=None)
@given(DAYS, st.integers(min_value=-240, max_value=240))
def test_shift_months_is_invertible(day: date, months: int) -> None:
    assert shift_months(shift_months(day, months), -months) == month_start(day)


@settings(max_examples=100, deadline=None)
@given(DAYS)
def test_trailing_window_spans_twelve_months_including_today(day: date) -> None:
    start, end = trailing_window(day)
    assert start <= day < end
    assert start.day == 1 and end.day == 1
    months = (end.year - start.year) * 12 + (end.month - start.month)
    assert months == WINDOW_MONTHS
