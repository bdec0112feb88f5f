"""Per-request identity for log lines.

The context is bound in the request's own task (middleware for the request id,
the async ``get_current_user`` dependency for the caller). Sync handlers and
services run in worker threads that start from a copy of that task's context,
so anything they log carries the same values. Values set from inside a worker
thread do not flow back.
"""
from __future__ import annotations

from contextvars import ContextVar
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RequestContext:
    request_id: Optional[str] = None
    business_id: Optional[str] = None
    user_id: Optional[str] = None
    role: Optional[str] = None

    def as_log_fields(self) -> Dict[str, Any]:
        return asdict(self)


_EMPTY = RequestContext()
_CONTEXT: ContextVar[RequestContext] = ContextVar("smartops_request_context", default=_EMPTY)


def current_context() -> RequestContext:
    return _CONTEXT.get()


def start_request(request_id: str) -> None:
    _CONTEXT.set(RequestContext(request_id=request_id))


def bind_user(user) -> None:
    """Attach the authenticated user (business, id, role) to the current request."""
    _CONTEXT.set(
        replace(
            _CONTEXT.get(),
            business_id=str(user.business_id),
            user_id=str(user.id),
            role=user.role,
        )
    )


def clear_request_context() -> None:
    _CONTEXT.set(_EMPTY)
