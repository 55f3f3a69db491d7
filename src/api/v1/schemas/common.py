"""Response bodies shared by the versioned and legacy routes."""

from typing import Any

from pydantic import BaseModel, Field

from core.exceptions import ErrorCode


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error_code: ErrorCode
    message: str
    details: dict[str, Any] | None = Field(
        default=None,
        description="Offending field or lookup key, when there is one",
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement used by first-revision endpoints."""

    message: str
