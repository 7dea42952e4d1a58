"""
Structured API errors.

Every failure the generation, purchase and admin flows can surface is one of
these classes. The handler registered in ``main.py`` renders them as
``{"error": <code>, "detail": <message>}`` so clients can branch on a stable
classification without seeing internals.
"""

from __future__ import annotations

from typing import Optional


class CoachAPIError(Exception):
    """Base class for errors rendered to API clients."""

    code = "internal_error"
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class UnauthorizedError(CoachAPIError):
    code = "unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentialError(CoachAPIError):
    code = "invalid_credential"
    status_code = 401
    default_message = "Invalid Token"


class ForbiddenError(CoachAPIError):
    code = "forbidden"
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(CoachAPIError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class InsufficientCreditError(CoachAPIError):
    code = "insufficient_credit"
    status_code = 403
    default_message = "Insufficient credits"


class ConfigurationError(CoachAPIError):
    """Missing upstream credential; the message is logged, never returned."""

    code = "configuration_error"
    status_code = 500
    default_message = "Service configuration error"

    @property
    def public_message(self) -> str:
        return self.default_message


class UpstreamError(CoachAPIError):
    code = "upstream_error"
    status_code = 502
    default_message = "AI Service Unavailable"


class InfrastructureError(CoachAPIError):
    code = "infrastructure_error"
    status_code = 503
    default_message = "Service temporarily unavailable"


def public_message(exc: CoachAPIError) -> str:
    """Return the message that is safe to show to API clients."""
    return getattr(exc, "public_message", exc.message)
