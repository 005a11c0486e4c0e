# Password hashing and session token helpers.
#
# Passwords are stored as salted PBKDF2-SHA256 hashes (werkzeug);
# check_password_hash compares in constant time. Session tokens are
# HS256 JWTs carrying the user id in "sub".

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from orderhub.core.config import Settings


PASSWORD_HASH_METHOD = "pbkdf2:sha256"


def get_password_hash(password: str) -> str:
    return generate_password_hash(password, method=PASSWORD_HASH_METHOD)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    return check_password_hash(password_hash, plain_password)


def create_access_token(
    settings: Settings,
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    to_encode = dict(data)
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """Return the token claims or raise ValueError if invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid session token") from exc
