from __future__ import annotations

from datetime import date
from decimal import Decimal

from expense_tracker import crud, summaries


def test_shift_months_crosses_year_boundaries():
    assert summaries.shift_months(date(2024, 1, 15), -1) == date(2023, 12, 1)
    assert summaries.shift_months(date(2024, 12, 31), 1) == date(2025, 1, 1)
    assert summaries.shift_months(date(2024, 3, 31), 0) == date(2024, 3, 1)


def test_trailing_window_covers_twelve_months():
    start, end = summaries.trailing_window(date(2024, 1, 15))
    assert start == date(2023, 2, 1)
    assert end == date(2024, 2, 1)


def _seed(db_session):
    user = crud.UserRepository(db_session).create("sum@x.com", "hash", "Sum")
    categories = {c.name: c for c in crud.CategoryRepository(db_session, user.id).list()}
    return user, categories, crud.ExpenseRepository(db_session, user.id)


def test_monthly_summary_groups_by_month(db_session):
    user, categories, expenses = _seed(db_session)
    other = categories["Other"].id
    expenses.create(other, Decimal("0.10"), "a", date(2024, 6, 1))
    expenses.create(other, Decimal("0.20"), "b", date(2024, 6, 30))
    expenses.create(other, Decimal("5.00"), "c", date(2024, 4, 10))

    rows = summaries.monthly_summary(db_session, user.id, date(2024, 6, 15))
    assert [(row.year, row.month) for row in rows] == [(2024, "June"), (2024, "April")]
    assert rows[0].total_amount == Decimal("0.30")
    assert rows[0].expense_count == 2
    assert rows[1].total_amount == Decimal("5.00")


def test_monthly_summary_ignores_future_months(db_session):
    user, categories, expenses = _seed(db_session)
    expenses.create(categories["Other"].id, Decimal("1.00"), "later", date(2024, 7, 1))
    assert summaries.monthly_summary(db_session, user.id, date(2024, 6, 15)) == []


def test_category_summary_zero_rows(db_session):
    user, _, _ = _seed(db_session)
    rows = summaries.category_summary(db_session, user.id, date(2024, 6, 15))
    assert len(rows) == 7
    assert all(row.total_amount == Decimal("0.00") and row.expense_count == 0 for row in rows)
    assert [row.category_name for row in rows] == sorted(row.category_name for row in rows)


def test_category_summary_only_counts_current_month(db_session):
    user, categories, expenses = _seed(db_session)
    health = categories["Healthcare"].id
    expenses.create(health, Decimal("20.00"), "visit", date(2024, 6, 2))
    expenses.create(health, Decimal("30.00"), "old", date(2024, 5, 31))

    rows = summaries.category_summary(db_session, user.id, date(2024, 6, 15))
    assert rows[0].category_name == "Healthcare"
    assert rows[0].category_color == "#DFE6E9"
    assert rows[0].total_amount == Decimal("20.00")
    assert rows[0].expense_count == 1


def test_summaries_are_scoped_to_user(db_session):
    user, categories, expenses = _seed(db_session)
    expenses.create(categories["Other"].id, Decimal("1.00"), "mine", date(2024, 6, 1))
    stranger = crud.UserRepository(db_session).create("stranger@x.com", "hash", "S")

    assert summaries.monthly_summary(db_session, stranger.id, date(2024, 6, 15)) == []
    rows = summaries.category_summary(db_session, stranger.id, date(2024, 6, 15))
    assert {row.expense_count for row in rows} == {0}
