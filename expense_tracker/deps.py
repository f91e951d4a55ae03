"""FastAPI dependencies shared by the routers."""
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import crud, database
from .errors import AuthError
from .security import TokenService, get_token_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> uuid.UUID:
    if credentials is None:
        raise AuthError("Missing authorization header")
    return tokens.verify_token(credentials.credentials)


def get_category_repository(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(database.get_db),
) -> crud.CategoryRepository:
    return crud.CategoryRepository(db, user_id)


def get_expense_repository(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(database.get_db),
) -> crud.ExpenseRepository:
    return crud.ExpenseRepository(db, user_id)
