"""
core/errors.py -- Application error taxonomy.

Every error the API surfaces deliberately is an InkwellError subclass. Each
carries the HTTP status and machine-readable code it maps to, so the single
exception handler in api/main.py can render all of them in the same
{"error": {"code", "message", "detail"}} envelope.

Stores raise StoreError for persistence failures they cannot attribute to
client input. Route handlers raise ValidationError / NotFoundError. The
request gate raises AuthenticationError -- strategies themselves never raise,
they return a Reject.
"""

from typing import Optional


class InkwellError(Exception):
    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(InkwellError):
    """Malformed or missing client input, or a uniqueness conflict."""

    status_code = 400
    code = "validation_error"


class AuthenticationError(InkwellError):
    """Bad credentials, or an absent / invalid / expired bearer token."""

    status_code = 401
    code = "unauthorized"

    def __init__(self, message: str, detail: Optional[str] = None, scheme: Optional[str] = None) -> None:
        super().__init__(message, detail)
        # Value for the WWW-Authenticate response header, when one applies.
        self.scheme = scheme


class NotFoundError(InkwellError):
    """The referenced id has no active row."""

    status_code = 404
    code = "not_found"


class StoreError(InkwellError):
    """Underlying persistence failure."""

    status_code = 500
    code = "store_error"
