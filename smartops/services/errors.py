"""Typed service errors.

Each error carries the HTTP status it maps to; ``smartops.core.errors`` turns
them into the ``{"error": ...}`` envelope.
"""
from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    default_message = "Invalid request"


class DuplicateError(ServiceError):
    default_message = "Record already exists"


class DuplicateEmail(DuplicateError):
    default_message = "User with this email already exists"


class DuplicateSubdomain(DuplicateError):
    default_message = "Subdomain already taken"


class SelfDeletionForbidden(ValidationError):
    default_message = "Cannot delete your own account"


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid credentials"


class InvalidToken(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid token"


class AuthorizationError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
