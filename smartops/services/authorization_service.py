from __future__ import annotations

import logging
from typing import Iterable

from fastapi import Request

from smartops.models.user import User
from smartops.services.errors import AuthorizationError

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Role checks for authenticated users; tenant scoping lives in the stores."""

    @staticmethod
    def normalize_role(role: str | None) -> str:
        return (role or "").strip().lower()

    @staticmethod
    def log_access_denied(*, reason: str, user: User, request: Request) -> None:
        endpoint = f"{request.method} {request.url.path}"
        logger.warning(
            "Access denied (%s): user_id=%s user_role=%s business_id=%s endpoint=%s",
            reason,
            getattr(user, "id", None),
            getattr(user, "role", None),
            getattr(user, "business_id", None),
            endpoint,
        )

    @classmethod
    def ensure_role(cls, *, request: Request, user: User, roles: Iterable[str]) -> None:
        allowed = {cls.normalize_role(role) for role in roles}
        if cls.normalize_role(user.role) not in allowed:
            cls.log_access_denied(reason="role_denied", user=user, request=request)
            raise AuthorizationError()
