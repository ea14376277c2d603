"""Error body returned by every failing endpoint."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Single human-readable message; internal causes are only logged."""

    error: str = Field(..., description="Error message")
