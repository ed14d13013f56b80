# app/core/exceptions.py
"""
Domain errors surfaced to API callers.

Every error carries an HTTP status and a message that is safe to show to the
client. They are turned into `{"success": false, "message": ...}` payloads by
the handlers in `app.core.error_handlers`.
"""

from typing import Optional


class StorefrontError(Exception):
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Bad input shape or a business rule on input (e.g. discount % range)."""

    status_code = 400
    default_message = "Invalid request"


class DuplicateCodeError(ValidationError):
    default_message = "This code already exists"


class AuthorizationError(StorefrontError):
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(StorefrontError):
    status_code = 404
    default_message = "Not found"


class InactiveCodeError(ValidationError):
    default_message = "Code not active"


class ExpiredError(ValidationError):
    default_message = "Code expired"


class UsageExhaustedError(ValidationError):
    default_message = "Usage limit reached"


class IneligibleCartError(ValidationError):
    default_message = (
        "This code is restricted to products or categories that are not in your cart"
    )
