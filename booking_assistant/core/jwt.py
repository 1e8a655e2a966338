# booking_assistant/core/jwt.py

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from booking_assistant.core.config import settings


def create_jwt_token(data: dict, expires_delta: timedelta = timedelta(hours=2)) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def decode_subject(token: str) -> Optional[str]:
    """Return the token's `sub` claim, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")
