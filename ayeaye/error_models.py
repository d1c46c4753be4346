"""
Error response models for the dispatcher.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ApiError
from .status import Status


class ErrorResponse(BaseModel):
    """Standard error body.

    Only the public message of an error is ever exposed to clients.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Could not find controller or endpoint matching 'nonsense'",
                "code": 404,
                "reason": "Not Found",
            }
        }
    )

    message: str = Field(
        ...,
        description="Human-readable error message describing what went wrong"
    )

    code: int = Field(
        ...,
        description="HTTP status code of the response"
    )

    reason: Optional[str] = Field(
        None,
        description="Canonical reason phrase for the status code"
    )

    def model_dump(self, **kwargs) -> Dict[str, Any]:
        kwargs.setdefault("exclude_none", True)
        return super().model_dump(**kwargs)

    @classmethod
    def from_error(cls, error: ApiError) -> "ErrorResponse":
        """Create an ErrorResponse from a dispatcher error, hiding its private message."""
        return cls(
            message=error.get_public_message(),
            code=error.code,
            reason=Status.get_message_for_code(error.code),
        )

    @classmethod
    def from_status(cls, code: int) -> "ErrorResponse":
        """Create an ErrorResponse carrying only the reason phrase of a status code."""
        reason = Status.get_message_for_code(code)
        return cls(message=reason, code=code, reason=reason)
