from datetime import datetime, timedelta, timezone

from jose import jwt

from . import config


def create_jwt(data: dict, expires_minutes: int = None) -> str:
    to_encode = data.copy()
    minutes = expires_minutes if expires_minutes is not None else config.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.require_secret_key(), algorithm=config.ALGORITHM)


def decode_jwt(token: str) -> dict:
    """Raises jose.JWTError on a bad signature or an expired token."""
    return jwt.decode(token, config.require_secret_key(), algorithms=[config.ALGORITHM])
