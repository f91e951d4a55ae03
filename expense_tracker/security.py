"""Password hashing and signed session tokens.

Passwords are hashed with argon2id; the PHC string embeds the salt and the
cost parameters, so verification needs nothing but the stored hash.

Session tokens are HS256 JWTs carrying the user id as ``sub`` and an ``exp``
timestamp. There is no revocation list: a token stays valid until it expires.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError
from fastapi import Request

from .config import MIN_SECRET_BYTES, Settings
from .errors import AuthError, InternalError

ALGORITHM = "HS256"

_hasher = PasswordHasher()


def hash_password(plaintext: str) -> str:
    try:
        return _hasher.hash(plaintext)
    except HashingError as exc:
        raise InternalError("Password hashing failed") from exc


def verify_password(plaintext: str, password_hash: str) -> bool:
    """Return ``True`` when ``plaintext`` matches ``password_hash``.

    Mismatches, unparsable hashes and passwords that cannot be encoded as
    UTF-8 all yield ``False``.
    """

    try:
        return _hasher.verify(password_hash, plaintext)
    except (VerificationError, InvalidHashError, UnicodeEncodeError):
        return False


class TokenService:
    """Issue and verify session tokens with a fixed key and lifetime."""

    def __init__(self, secret: str, lifetime: timedelta = timedelta(hours=24)) -> None:
        if len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(f"Signing key must be at least {MIN_SECRET_BYTES} bytes")
        if lifetime <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        self._secret = secret
        self.lifetime = lifetime

    def issue_token(self, user_id: uuid.UUID, issued_at: Optional[datetime] = None) -> str:
        issued_at = issued_at or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> uuid.UUID:
        """Return the user id carried by ``token`` or raise :class:`AuthError`."""

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid or expired token") from exc
        try:
            return uuid.UUID(str(claims["sub"]))
        except ValueError as exc:
            raise AuthError("Invalid user ID in token") from exc

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(settings.jwt_secret, timedelta(hours=settings.jwt_expiration_hours))


def get_token_service(request: Request) -> TokenService:
    """Token service created for the running application."""

    return request.app.state.tokens
