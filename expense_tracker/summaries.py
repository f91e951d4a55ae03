"""Monthly and per-category aggregates computed on read from the expense table.

Both summaries run a single grouped query scoped to one user. Month
boundaries come from ``expense_date`` (a calendar date) relative to a
``today`` supplied by the caller in UTC.
"""
from __future__ import annotations

import calendar
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import and_, extract, func, select
from sqlalchemy.orm import Session

from . import models, schemas

WINDOW_MONTHS = 12


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(schemas.TWO_PLACES)


def month_start(day: date) -> date:
    return day.replace(day=1)


def shift_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from the month containing ``day``."""

    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def trailing_window(today: date, months: int = WINDOW_MONTHS) -> Tuple[date, date]:
    """Half-open ``[start, end)`` covering ``months`` calendar months ending with today's."""

    return shift_months(today, -(months - 1)), shift_months(today, 1)


def monthly_summary(session: Session, user_id: uuid.UUID, today: date) -> List[schemas.MonthlySummary]:
    start, end = trailing_window(today)
    year = extract("year", models.Expense.expense_date).label("year")
    month = extract("month", models.Expense.expense_date).label("month")
    stmt = (
        select(
            year,
            month,
            func.sum(models.Expense.amount).label("total_amount"),
            func.count(models.Expense.id).label("expense_count"),
        )
        .where(
            models.Expense.user_id == user_id,
            models.Expense.expense_date >= start,
            models.Expense.expense_date < end,
        )
        .group_by(year, month)
        .order_by(year.desc(), month.desc())
    )
    return [
        schemas.MonthlySummary(
            year=int(row.year),
            month=calendar.month_name[int(row.month)],
            total_amount=_money(row.total_amount),
            expense_count=row.expense_count,
        )
        for row in session.execute(stmt)
    ]


def category_summary(session: Session, user_id: uuid.UUID, today: date) -> List[schemas.CategorySummary]:
    """Totals for the month containing ``today``, one row per category the user owns."""

    start, end = month_start(today), shift_months(today, 1)
    total = func.coalesce(func.sum(models.Expense.amount), 0).label("total_amount")
    stmt = (
        select(
            models.Category.id,
            models.Category.name,
            models.Category.color,
            models.Category.icon,
            total,
            func.count(models.Expense.id).label("expense_count"),
        )
        .outerjoin(
            models.Expense,
            and_(
                models.Expense.category_id == models.Category.id,
                models.Expense.user_id == user_id,
                models.Expense.expense_date >= start,
                models.Expense.expense_date < end,
            ),
        )
        .where(models.Category.user_id == user_id)
        .group_by(models.Category.id, models.Category.name, models.Category.color, models.Category.icon)
        .order_by(total.desc(), models.Category.name.asc())
    )
    return [
        schemas.CategorySummary(
            category_id=row.id,
            category_name=row.name,
            category_color=row.color,
            category_icon=row.icon,
            total_amount=_money(row.total_amount),
            expense_count=row.expense_count,
        )
        for row in session.execute(stmt)
    ]
