from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt

from eduplatform.core import config


class TokenStatus(str, Enum):
    VALID = 'valid'
    EXPIRED = 'expired'
    INVALID = 'invalid'


def create_access_token(username: str, role: str | None, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    issued_at = datetime.now(timezone.utc)
    payload = {
        'username': username,
        'role': role,
        'iat': issued_at,
        'exp': issued_at + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])


def read_access_token(token: str) -> tuple[TokenStatus, dict | None]:
    """Decode ``token`` once, returning its status and, when valid, its payload."""
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        return TokenStatus.EXPIRED, None
    except jwt.InvalidTokenError:
        return TokenStatus.INVALID, None
    return TokenStatus.VALID, payload


def verify_access_token(token: str) -> TokenStatus:
    token_status, _payload = read_access_token(token)
    return token_status
