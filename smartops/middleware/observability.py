from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from smartops.core.metrics import request_metrics
from smartops.core.request_context import clear_request_context, start_request

logger = logging.getLogger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_request(request_id)

        status_code = 500
        endpoint = request.url.path
        method = request.method
        response = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # The handler ran in its own task; its bound user comes back through request.state.
            user = getattr(request.state, "user", None)
            business_id = _as_str(getattr(user, "business_id", None))
            duration_ms = round((time.perf_counter() - start) * 1000, 2)

            request_metrics.observe(
                endpoint=endpoint,
                method=method,
                status_code=status_code,
                duration_ms=duration_ms,
                business_id=business_id,
            )

            logger.info(
                "request completed",
                extra={
                    "request_id": request_id,
                    "business_id": business_id,
                    "user_id": _as_str(getattr(user, "id", None)),
                    "role": getattr(user, "role", None),
                    "endpoint": endpoint,
                    "method": method,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

            if response is not None:
                response.headers["X-Request-ID"] = request_id

            clear_request_context()


def _as_str(value) -> str | None:
    return str(value) if value is not None else None
