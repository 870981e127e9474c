"""Domain error taxonomy.

Every error carries the HTTP status it maps to, a stable numeric code and a
human-readable message, so the API layer renders them uniformly and the live
connection can forward ``message`` in an error frame.
"""

from __future__ import annotations

from typing import Any, Optional


class ServiceError(Exception):
    status_code: int = 500
    code: int = 5000
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, *, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


# Authentication -------------------------------------------------------------


class AuthError(ServiceError):
    status_code = 401
    code = 4010
    default_message = "Unauthorized"


class MissingTokenError(AuthError):
    code = 4010
    default_message = "Missing JWT"


class MalformedTokenError(AuthError):
    code = 4011
    default_message = "Malformed JWT"


class InvalidSignatureError(AuthError):
    code = 4012
    default_message = "Invalid JWT signature"


class TokenExpiredError(AuthError):
    code = 4013
    default_message = "JWT has expired"


class TokenRevokedError(AuthError):
    code = 4014
    default_message = "JWT has been revoked"


class UserNotFoundError(AuthError):
    code = 4015
    default_message = "User not found"


class InvalidCredentialsError(AuthError):
    code = 4016
    default_message = "Invalid username or password"


# Resources ------------------------------------------------------------------


class NotFoundError(ServiceError):
    status_code = 404
    code = 4040
    default_message = "Not found"


class TaskNotFoundError(NotFoundError):
    code = 4041
    default_message = "Task not found"


class ConflictError(ServiceError):
    status_code = 409
    code = 4090
    default_message = "Conflict"


class UsernameTakenError(ConflictError):
    code = 4091
    default_message = "Username already exists"


class BadRequestError(ServiceError):
    status_code = 400
    code = 4001
    default_message = "Bad request"


class MissingFieldsError(BadRequestError):
    code = 4001
    default_message = "Must provide either JWT or username/password"


# Infrastructure -------------------------------------------------------------


class InfrastructureError(ServiceError):
    status_code = 503
    code = 5030
    default_message = "Service unavailable"


class StoreUnavailableError(InfrastructureError):
    code = 5031
    default_message = "Shared store unavailable"


# Notifications --------------------------------------------------------------


class NotificationStreamClosed(Exception):
    """The subscription's underlying pub/sub connection went away."""


class NotificationDecodeError(Exception):
    """A published payload could not be parsed as a change event."""
