# canteen/api/auth.py
"""
Weryfikacja tokenu JWT (Authorization: Bearer ...).

Wydawanie tokenow (logowanie, rejestracja) jest w osobnym serwisie,
tutaj tylko create_access_token dla narzedzi i testow.
"""
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from canteen.domain.errors import Forbidden, Unauthorized
from canteen.utils.logging import get_logger
from canteen.utils.settings import ACCESS_TOKEN_TTL_SECONDS, JWT_ALGORITHM, JWT_SECRET

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    user_id: int
    is_admin: bool = False
    email: str | None = None


def create_access_token(
    user_id: int,
    is_admin: bool = False,
    email: str | None = None,
    ttl_seconds: int = ACCESS_TOKEN_TTL_SECONDS,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "is_admin": is_admin,
        "email": email,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid or expired token")

    if not isinstance(payload.get("user_id"), int):
        raise Unauthorized("Invalid or expired token")

    return CurrentUser(
        user_id=payload["user_id"],
        is_admin=bool(payload.get("is_admin")),
        email=payload.get("email"),
    )


def get_current_user(
    bearer: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    if bearer is None or not bearer.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")

    try:
        return decode_access_token(bearer.credentials)
    except Unauthorized as e:
        logger.warning(f"Rejected token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


def ensure_admin(user: CurrentUser) -> CurrentUser:
    if not user.is_admin:
        raise Forbidden("Admin privileges required")
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    try:
        return ensure_admin(user)
    except Forbidden as e:
        logger.warning(f"User {user.user_id} denied admin access")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
