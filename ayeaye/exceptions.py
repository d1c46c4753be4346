"""
Custom exceptions for the request dispatcher.
"""

from typing import Optional

from .status import Status


class ApiError(Exception):
    """Base exception for dispatcher errors.

    Carries the HTTP status code the orchestrator should answer with and a public
    message that is safe to show to clients. ``str(error)`` is the private message,
    which is only logged.
    """

    default_code = 500

    def __init__(self, message: str, code: Optional[int] = None, public_message: Optional[str] = None):
        self.code = code if code is not None else self.default_code
        self.public_message = public_message or Status.get_message_for_code(self.code)
        super().__init__(message)

    def get_public_message(self) -> str:
        return self.public_message


class NotFound(ApiError):
    """Raised when no controller or endpoint matches a path segment."""

    default_code = 404

    def __init__(self, segment: str):
        self.segment = segment
        message = f"Could not find controller or endpoint matching '{segment}'"
        super().__init__(message, public_message=message)


class MissingParameter(ApiError):
    """Raised when a required endpoint parameter is absent from the request."""

    default_code = 400

    def __init__(self, name: str):
        self.name = name
        message = f"Missing required parameter '{name}'"
        super().__init__(message, public_message=message)


class InvalidArgument(ApiError, TypeError):
    """Raised when the request normalizer is given malformed parameters."""

    pass
