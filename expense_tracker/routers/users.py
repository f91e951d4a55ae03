from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..deps import get_current_user_id
from ..errors import NotFoundError

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=schemas.UserRead)
def get_current_user(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(database.get_db),
) -> schemas.UserRead:
    user = crud.UserRepository(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
