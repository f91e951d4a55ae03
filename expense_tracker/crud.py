"""Owner-scoped data access for the expense tracking backend.

Handlers never query categories or expenses directly: they go through a
:class:`ScopedRepository` bound to the authenticated user, so every
statement carries the ``user_id`` filter. Lookups return ``None`` when a row
is absent or owned by someone else; the caller picks the HTTP status.
"""
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import ClassVar, List, Optional, Tuple, Type

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .errors import ConflictError
from .models import utcnow
from .schemas import ExpenseFilters, Patch

DEFAULT_CATEGORIES: Tuple[Tuple[str, str, str], ...] = (
    ("Food & Dining", "#FF6B6B", "🍔"),
    ("Transportation", "#4ECDC4", "🚗"),
    ("Shopping", "#45B7D1", "🛍️"),
    ("Entertainment", "#96CEB4", "🎬"),
    ("Bills & Utilities", "#FFEAA7", "💡"),
    ("Healthcare", "#DFE6E9", "🏥"),
    ("Other", "#B2BEC3", "📦"),
)


def _flush(session: Session, conflict_message: str) -> None:
    try:
        session.flush()
    except IntegrityError as exc:
        raise ConflictError(conflict_message) from exc


class UserRepository:
    """Unscoped user lookups, used only by registration, login and ``/users/me``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: uuid.UUID) -> Optional[models.User]:
        return self.session.get(models.User, user_id)

    def get_by_email(self, email: str) -> Optional[models.User]:
        stmt = select(models.User).where(models.User.email == email)
        return self.session.scalar(stmt)

    def email_exists(self, email: str) -> bool:
        stmt = select(func.count(models.User.id)).where(models.User.email == email)
        return (self.session.scalar(stmt) or 0) > 0

    def create(self, email: str, password_hash: str, full_name: str) -> models.User:
        """Insert a user together with the default categories in one flush."""

        user = models.User(id=uuid.uuid4(), email=email, password_hash=password_hash, full_name=full_name)
        self.session.add(user)
        self.session.add_all(
            models.Category(user_id=user.id, name=name, color=color, icon=icon)
            for name, color, icon in DEFAULT_CATEGORIES
        )
        _flush(self.session, "Email already registered")
        self.session.refresh(user)
        return user


class ScopedRepository:
    """Base repository whose statements are all filtered by ``user_id``."""

    model: ClassVar[Type[models.Base]]

    def __init__(self, session: Session, user_id: uuid.UUID) -> None:
        self.session = session
        self.user_id = user_id

    def _select(self) -> Select:
        return select(self.model).where(self.model.user_id == self.user_id)

    def get(self, entity_id: uuid.UUID):
        return self.session.scalar(self._select().where(self.model.id == entity_id))

    def exists(self, entity_id: uuid.UUID) -> bool:
        stmt = select(func.count(self.model.id)).where(
            self.model.user_id == self.user_id,
            self.model.id == entity_id,
        )
        return (self.session.scalar(stmt) or 0) > 0

    def delete(self, entity) -> None:
        self.session.delete(entity)
        self.session.flush()


class CategoryRepository(ScopedRepository):
    model = models.Category

    def list(self) -> List[models.Category]:
        stmt = self._select().order_by(models.Category.name)
        return list(self.session.scalars(stmt))

    def name_taken(self, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        stmt = select(func.count(models.Category.id)).where(
            models.Category.user_id == self.user_id,
            models.Category.name == name,
        )
        if exclude_id is not None:
            stmt = stmt.where(models.Category.id != exclude_id)
        return (self.session.scalar(stmt) or 0) > 0

    def create(self, name: str, color: Optional[str] = None, icon: Optional[str] = None) -> models.Category:
        category = models.Category(user_id=self.user_id, name=name, color=color, icon=icon)
        self.session.add(category)
        _flush(self.session, "Category name already exists")
        self.session.refresh(category)
        return category

    def update(self, category: models.Category, patch: Patch) -> models.Category:
        patch.apply(category)
        _flush(self.session, "Category name already exists")
        self.session.refresh(category)
        return category

    def expense_count(self, category_id: uuid.UUID) -> int:
        stmt = select(func.count(models.Expense.id)).where(
            models.Expense.user_id == self.user_id,
            models.Expense.category_id == category_id,
        )
        return self.session.scalar(stmt) or 0


class ExpenseRepository(ScopedRepository):
    model = models.Expense

    def list(self, filters: Optional[ExpenseFilters] = None) -> List[models.Expense]:
        filters = filters or ExpenseFilters()
        stmt = self._select()
        if filters.start_date is not None:
            stmt = stmt.where(models.Expense.expense_date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(models.Expense.expense_date <= filters.end_date)
        if filters.category_id is not None:
            stmt = stmt.where(models.Expense.category_id == filters.category_id)
        stmt = stmt.order_by(
            models.Expense.expense_date.desc(),
            models.Expense.created_at.desc(),
            models.Expense.id,
        )
        return list(self.session.scalars(stmt))

    def create(
        self,
        category_id: uuid.UUID,
        amount: Decimal,
        description: str,
        expense_date: date,
    ) -> models.Expense:
        expense = models.Expense(
            user_id=self.user_id,
            category_id=category_id,
            amount=amount,
            description=description,
            expense_date=expense_date,
        )
        self.session.add(expense)
        _flush(self.session, "Expense could not be stored")
        self.session.refresh(expense)
        return expense

    def update(self, expense: models.Expense, patch: Patch) -> models.Expense:
        patch.apply(expense)
        expense.updated_at = utcnow()
        _flush(self.session, "Expense could not be stored")
        self.session.refresh(expense)
        return expense

