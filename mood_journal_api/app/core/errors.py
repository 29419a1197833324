"""
Domain errors raised by the service layer.

Every rejection a caller can receive is a ``ServiceError`` carrying a
machine-readable ``code``, a human-readable ``message`` and the HTTP
status the API layer answers with.  Store failures are deliberately
not wrapped here; they propagate to the caller unchanged.
"""

from typing import Any, Dict

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected error."

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {"code": self.code, "message": self.message},
        }


class Unauthenticated(ServiceError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "You must be signed in to perform this action."


class NotFound(ServiceError):
    """The record does not exist or belongs to another user.

    Both cases produce the same error so that callers cannot test for
    records owned by someone else.
    """

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ValidationFailed(ServiceError):
    code = "BAD_REQUEST"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input."
