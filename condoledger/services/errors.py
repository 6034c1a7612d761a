"""Typed errors raised by ledger and payment operations."""

from http import HTTPStatus
from typing import Any, Dict


class LedgerError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = HTTPStatus.BAD_REQUEST):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(LedgerError):
    """Referenced owner, account or payment does not exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, "not_found", HTTPStatus.NOT_FOUND)


class InvalidAmountError(LedgerError):
    """Amount is zero, negative or unparseable where a positive value is required."""

    def __init__(self, message: str = "Invalid amount"):
        super().__init__(message, "invalid_amount", HTTPStatus.UNPROCESSABLE_ENTITY)


class ConflictError(LedgerError):
    """A structural precondition does not hold."""

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, "conflict", HTTPStatus.CONFLICT)


class StorageFailureError(LedgerError):
    """The unit of work could not be committed."""

    def __init__(self, message: str = "Storage failure"):
        super().__init__(message, "storage_failure", HTTPStatus.SERVICE_UNAVAILABLE)


def error_response(error: LedgerError) -> Dict[str, Any]:
    """Create a standardized error response."""
    return {
        "error": {
            "code": error.code,
            "message": error.message,
        }
    }


__all__ = [
    "LedgerError",
    "NotFoundError",
    "InvalidAmountError",
    "ConflictError",
    "StorageFailureError",
    "error_response",
]
