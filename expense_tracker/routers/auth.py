"""Registration and login, the only unauthenticated API endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..errors import AuthError, ConflictError
from ..security import TokenService, get_token_service, hash_password, verify_password

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: schemas.RegisterRequest,
    db: Session = Depends(database.get_db),
    tokens: TokenService = Depends(get_token_service),
) -> schemas.AuthResponse:
    users = crud.UserRepository(db)
    if users.email_exists(payload.email):
        raise ConflictError("Email already registered")
    user = users.create(payload.email, hash_password(payload.password), payload.full_name)
    LOG.info("Registered user %s", user.id)
    return schemas.AuthResponse(token=tokens.issue_token(user.id), user=schemas.UserRead.model_validate(user))


@router.post("/login", response_model=schemas.AuthResponse)
def login(
    payload: schemas.LoginRequest,
    db: Session = Depends(database.get_db),
    tokens: TokenService = Depends(get_token_service),
) -> schemas.AuthResponse:
    user = crud.UserRepository(db).get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        raise AuthError("Invalid credentials")
    LOG.info("User %s logged in", user.id)
    return schemas.AuthResponse(token=tokens.issue_token(user.id), user=schemas.UserRead.model_validate(user))
