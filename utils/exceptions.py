"""
Application error taxonomy.

Every per-request error derives from AppError and carries the HTTP status and
the machine-readable code that api.errors renders into the failure envelope.
ConfigurationError is not an AppError: it is raised while the app is being
built and stops the process instead of becoming a 4xx/5xx.
"""
from __future__ import annotations


class AppError(Exception):
    status = 500
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""
    status = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"


class NotFoundError(AppError):
    status = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class AuthenticationError(AppError):
    """Bad credentials or a missing/invalid/expired/reused token."""
    status = 401
    code = "UNAUTHORIZED"
    default_message = "unauthorized"


class ConflictError(AppError):
    status = 409
    code = "CONFLICT"
    default_message = "Conflict"


class DependencyError(AppError):
    """The profile store or the media host failed. Detail stays in the logs."""
    status = 500
    code = "DEPENDENCY_ERROR"
    default_message = "Something went wrong"


class ConfigurationError(Exception):
    """Signing or hashing configuration is unusable; the service must not start."""


class TokenError(Exception):
    """A token failed verification. Never shown to callers as-is."""
