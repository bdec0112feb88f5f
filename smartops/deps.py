# smartops/deps.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.core.request_context import bind_user
from smartops.models.user import User
from smartops.services.auth import decode_access_token, extract_user_id
from smartops.services.authorization_service import AuthorizationService
from smartops.services.errors import InvalidToken

# auto_error=False: a missing header must be a 401 with our own message, not FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False)

logger = logging.getLogger(__name__)

MISSING_TOKEN_DETAIL = "Access token required"


def _token_business_id(payload: Dict[str, Any]) -> Optional[int]:
    raw = payload.get("business_id")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidToken() from exc


def load_token_user(db: Session, token: str) -> User:
    """Return the active user a bearer token belongs to, or raise ``InvalidToken``."""
    payload = decode_access_token(token)
    user_id = extract_user_id(payload)
    token_business_id = _token_business_id(payload)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        logger.info("token rejected user_id=%s reason=%s", user_id, "missing" if user is None else "inactive")
        raise InvalidToken()

    if token_business_id is not None and token_business_id != int(user.business_id):
        raise InvalidToken()
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user and bind it to the request.

    - no token: 401
    - bad signature, expired, unknown or deactivated user: 403

    Async so ``bind_user`` runs in the request task; the sync route handler
    and the services it calls inherit that binding in their worker thread.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MISSING_TOKEN_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await run_in_threadpool(load_token_user, db, credentials.credentials)
    request.state.user = user
    bind_user(user)
    return user


def require_role(roles: Iterable[str]):
    allowed = tuple(roles)

    def _dependency(request: Request, user: User = Depends(get_current_user)) -> User:
        AuthorizationService.ensure_role(request=request, user=user, roles=allowed)
        return user

    return _dependency
