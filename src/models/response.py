"""Common response wrappers."""

from typing import Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Success payload for endpoints that only acknowledge."""

    success: bool = True
    message: str


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str = "OK"
    message: str
    timestamp: str
    environment: Optional[str] = None
