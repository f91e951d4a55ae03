from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status

from .. import crud, schemas
from ..deps import get_category_repository
from ..errors import ConflictError, NotFoundError, ValidationError

router = APIRouter(prefix="/categories", tags=["categories"])


def _owned(categories: crud.CategoryRepository, category_id: uuid.UUID):
    category = categories.get(category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


@router.get("", response_model=List[schemas.CategoryRead])
def list_categories(
    categories: crud.CategoryRepository = Depends(get_category_repository),
) -> List[schemas.CategoryRead]:
    return categories.list()


@router.post("", response_model=schemas.CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: schemas.CategoryCreate,
    categories: crud.CategoryRepository = Depends(get_category_repository),
) -> schemas.CategoryRead:
    if categories.name_taken(category_in.name):
        raise ConflictError("Category name already exists")
    return categories.create(category_in.name, category_in.color, category_in.icon)


@router.get("/{category_id}", response_model=schemas.CategoryRead)
def get_category(
    category_id: uuid.UUID,
    categories: crud.CategoryRepository = Depends(get_category_repository),
) -> schemas.CategoryRead:
    return _owned(categories, category_id)


@router.put("/{category_id}", response_model=schemas.CategoryRead)
def update_category(
    category_id: uuid.UUID,
    update_in: schemas.CategoryUpdate,
    categories: crud.CategoryRepository = Depends(get_category_repository),
) -> schemas.CategoryRead:
    category = _owned(categories, category_id)
    patch = update_in.to_patch()
    if not patch:
        raise ValidationError("No fields to update")
    if patch.provided("name") and categories.name_taken(patch.get("name"), exclude_id=category_id):
        raise ConflictError("Category name already exists")
    return categories.update(category, patch)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: uuid.UUID,
    categories: crud.CategoryRepository = Depends(get_category_repository),
) -> Response:
    category = _owned(categories, category_id)
    if categories.expense_count(category_id) > 0:
        raise ConflictError("Cannot delete category with existing expenses")
    categories.delete(category)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
