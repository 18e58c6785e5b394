"""
Domain errors raised by the use cases.

Every error carries a human-readable ``message`` and a stable ``code``.
``main.py`` registers a single handler that turns them into HTTP responses
using ``status_code``.
"""

from enum import Enum
from typing import Any, Optional


class AppError(Exception):
    """Base class for every error the API reports to the caller."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "error": self.code}
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Uniqueness violation (email, cnpj)."""

    status_code = 409


class RegistrationConflictError(ConflictError):
    """Email already taken on self-registration; the public endpoint answers 400."""

    status_code = 400


class ServiceUnavailableError(AppError):
    status_code = 503


class TokenErrorKind(str, Enum):
    expired = "expired"
    malformed = "malformed"
    not_yet_valid = "not_yet_valid"
    other = "other"


class TokenError(UnauthorizedError):
    """Session token rejected; ``kind`` tells why."""

    def __init__(self, kind: TokenErrorKind, message: str):
        super().__init__(message, code="TokenError", details={"reason": kind.value})
        self.kind = kind
