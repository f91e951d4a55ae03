from __future__ import annotations

import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from .. import crud, schemas
from ..deps import get_category_repository, get_expense_repository
from ..errors import NotFoundError, ValidationError

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _owned(expenses: crud.ExpenseRepository, expense_id: uuid.UUID):
    expense = expenses.get(expense_id)
    if expense is None:
        raise NotFoundError("Expense not found")
    return expense


def _require_category(categories: crud.CategoryRepository, category_id: uuid.UUID) -> None:
    if not categories.exists(category_id):
        raise NotFoundError("Category not found")


@router.get("", response_model=List[schemas.ExpenseRead])
def list_expenses(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category_id: Optional[uuid.UUID] = Query(None),
    expenses: crud.ExpenseRepository = Depends(get_expense_repository),
) -> List[schemas.ExpenseRead]:
    filters = schemas.ExpenseFilters(start_date=start_date, end_date=end_date, category_id=category_id)
    problem = filters.check()
    if problem:
        raise ValidationError(problem)
    return expenses.list(filters)


@router.post("", response_model=schemas.ExpenseRead, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_in: schemas.ExpenseCreate,
    expenses: crud.ExpenseRepository = Depends(get_expense_repository),
    categories: crud.CategoryRepository = Depends(get_category_repository),
) -> schemas.ExpenseRead:
    _require_category(categories, expense_in.category_id)
    return expenses.create(
        category_id=expense_in.category_id,
        amount=expense_in.amount,
        description=expense_in.description,
        expense_date=expense_in.expense_date,
    )


@router.get("/{expense_id}", response_model=schemas.ExpenseRead)
def get_expense(
    expense_id: uuid.UUID,
    expenses: crud.ExpenseRepository = Depends(get_expense_repository),
) -> schemas.ExpenseRead:
    return _owned(expenses, expense_id)


@router.put("/{expense_id}", response_model=schemas.ExpenseRead)
def update_expense(
    expense_id: uuid.UUID,
    update_in: schemas.ExpenseUpdate,
    expenses: crud.ExpenseRepository = Depends(get_expense_repository),
    categories: crud.CategoryRepository = Depends(get_category_repository),
) -> schemas.ExpenseRead:
    expense = _owned(expenses, expense_id)
    patch = update_in.to_patch()
    if patch.provided("category_id"):
        _require_category(categories, patch.get("category_id"))
    return expenses.update(expense, patch)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: uuid.UUID,
    expenses: crud.ExpenseRepository = Depends(get_expense_repository),
) -> Response:
    expenses.delete(_owned(expenses, expense_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
