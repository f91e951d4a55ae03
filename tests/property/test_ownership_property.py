from __future__ import annotations

from datetime import date
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st
from sqlalchemy.orm import Session

from expense_tracker import crud, summaries

CATEGORY_NAMES = [name for name, _, _ in crud.DEFAULT_CATEGORIES]

EXPENSES = st.lists(
    st.tuples(st.sampled_from(CATEGORY_NAMES), st.integers(min_value=1, max_value=10**6)),
    min_size=1,
    max_size=6,
)


@settings(max_examples=15, deadline=None)
@given(EXPENSES)
def test_foreign_rows_are_invisible(engine, picks: list[tuple[str, int]]) -> None:
    with Session(engine) as session:
        users = crud.UserRepository(session)
        alice = users.create("alice@x.com", "hash", "Alice")
        bob = users.create("bob@x.com", "hash", "Bob")
        owned = {c.name: c for c in crud.CategoryRepository(session, alice.id).list()}
        created = [
            crud.ExpenseRepository(session, alice.id).create(
                owned[name].id, Decimal(cents).scaleb(-2), "item", date(2024, 1, 1)
            )
            for name, cents in picks
        ]

        bob_categories = crud.CategoryRepository(session, bob.id)
        bob_expenses = crud.ExpenseRepository(session, bob.id)
        assert bob_expenses.list() == []
        for expense in created:
            assert bob_expenses.get(expense.id) is None
            assert not bob_expenses.exists(expense.id)
        for category in owned.values():
            assert bob_categories.get(category.id) is None
            assert bob_categories.expense_count(category.id) == 0
        assert summaries.monthly_summary(session, bob.id, date(2024, 1, 15)) == []

        alice_total = sum(row.total_amount for row in summaries.monthly_summary(session, alice.id, date(2024, 1, 15)))
        assert alice_total == sum(Decimal(cents).scaleb(-2) for _, cents in picks)
        session.rollback()
