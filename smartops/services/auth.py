from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from smartops.core import config
from smartops.services.errors import InvalidToken


def _signing_key() -> str:
    if not config.JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY is not configured")
    return config.JWT_SECRET_KEY


def create_access_token(
    user_id: int,
    business_id: int,
    expires_minutes: Optional[int] = None,
) -> str:
    """Sign a bearer token for ``user_id``.

    ``sub`` must be a string for python-jose; ``user_id`` and ``business_id``
    ride along as plain claims.
    """
    now = datetime.now(timezone.utc)
    lifetime = config.JWT_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "user_id": int(user_id),
        "business_id": int(business_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=lifetime)).timestamp()),
    }
    return jwt.encode(payload, _signing_key(), algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Return the token claims or raise ``InvalidToken`` (bad signature, expired, no subject)."""
    try:
        payload = jwt.decode(token, _signing_key(), algorithms=[config.JWT_ALGORITHM])
    except JWTError as exc:
        raise InvalidToken() from exc

    if extract_user_id(payload) is None:
        raise InvalidToken()
    return payload


def extract_user_id(payload: Dict[str, Any]) -> Optional[int]:
    raw = payload.get("sub")
    if raw is None:
        raw = payload.get("user_id")

    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None
