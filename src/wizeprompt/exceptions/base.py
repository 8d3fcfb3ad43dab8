"""
Application-level exceptions raised by repositories and services.
"""

from typing import Iterable


class RepositoryError(Exception):
    """
    Base exception for repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['title'])
    - constraint: optional DB constraint name or identifier (for logs only)
    - error_code: canonical short code (e.g., 'not_found', 'invalid_input') used by clients
    """

    # Map canonical error_code -> default HTTP status.
    ERROR_CODE_TO_STATUS = {
        "invalid_input": 400,
        "not_found": 404,
        "duplicate": 409,
        "invalid_field": 422,
        "persistence": 500,
        # fallback: default to 400 for general repository errors
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses:
            {"detail": "...", "code": "not_found", "fields": ["title"]}
        `constraint` stays out of the payload.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        """
        HTTP status for this error: looked up from `error_code`, 400 otherwise.
        """
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class NotFoundError(RepositoryError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class InvalidInputError(RepositoryError):
    """Caller-supplied value is malformed (non-positive id, blank title, bad parameters)."""

    def __init__(self, message: str = "Invalid input", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_input")


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFieldError(RepositoryError):
    """Raised when the caller passes unexpected/unknown fields to repository methods."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


class PersistenceError(RepositoryError):
    """
    The database rejected or failed an operation.

    `message` is the driver's text, unchanged; callers surface it as-is with a 500.
    `violation` is the classified IntegrityViolation when the failure was one.
    """

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, violation=None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="persistence")
        self.violation = violation

    def __str__(self) -> str:
        return self.message


__all__ = [
    "RepositoryError",
    "NotFoundError",
    "InvalidInputError",
    "DuplicateError",
    "InvalidFieldError",
    "PersistenceError",
]
