"""Pydantic schemas for health check responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the liveness probe."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    timestamp: datetime = Field(description="Current server time (UTC)")
