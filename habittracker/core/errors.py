"""Error taxonomy shared by services and controllers.

Services raise these; the application factory maps them to JSON responses of
the form ``{"ok": false, "error": <message>}`` with the class status code.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base class for errors that carry an HTTP status."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.code
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    code = "validation_error"


class AuthError(AppError):
    status_code = 401
    code = "unauthorized"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class ConflictError(AppError):
    # Duplicate unique keys are reported as bad requests, not 409.
    status_code = 400
    code = "conflict"


class BackendUnavailableError(AppError):
    status_code = 500
    code = "backend_unavailable"


class InternalError(AppError):
    status_code = 500
    code = "internal_error"
