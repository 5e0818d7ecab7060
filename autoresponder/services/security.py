"""Password hashing and bearer token primitives."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from autoresponder.config import settings
from autoresponder.services.errors import InvalidTokenError


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(claims: dict, *, ttl: Optional[timedelta] = None, now: Optional[datetime] = None) -> str:
    """Sign ``claims`` with an ``iat``/``exp`` window (``token_ttl_days`` by default)."""
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + (ttl if ttl is not None else timedelta(days=settings.token_ttl_days))
    payload = {**claims, "iat": issued_at, "exp": expires_at}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise InvalidTokenError("Invalid token") from exc
