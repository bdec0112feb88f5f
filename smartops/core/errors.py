from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartops.core.config import IS_DEV
from smartops.services.errors import ServiceError

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"


def _field_name(loc: tuple) -> str:
    # ("body", "firstName") -> "firstName"; ("body", "items", 0, "quantity") -> "items.0.quantity"
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) or "body"


def _is_missing(error: Dict[str, Any]) -> bool:
    # an empty string counts as not supplied
    if error.get("type") == "missing":
        return True
    return error.get("type") == "string_too_short" and error.get("input") == ""


def validation_error_content(errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    missing = [_field_name(tuple(error.get("loc", ()))) for error in errors if _is_missing(error)]
    if missing:
        return {"error": MISSING_FIELDS_MESSAGE, "required": missing}

    first = errors[0] if errors else {}
    field = _field_name(tuple(first.get("loc", ())))
    message = first.get("msg", "Invalid request")
    return {"error": f"{field}: {message}"}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        content: Dict[str, Any] = {"error": "Route not found"}
    elif isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=validation_error_content(list(exc.errors())),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error endpoint=%s %s", request.method, request.url.path)
    content = {"error": "Internal server error"}
    if IS_DEV:
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
