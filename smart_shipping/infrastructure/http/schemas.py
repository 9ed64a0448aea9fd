"""
Wire models of the upload backend.
"""

from pydantic import BaseModel, Field


class SessionDescriptor(BaseModel):
    """Body of ``GET /session-url``."""
    url: str = Field(..., min_length=1, description="Session URL presented to the user")


class ErrorPayload(BaseModel):
    """Body of a rejected upload."""
    error: str = Field(..., description="Server-provided error message")
