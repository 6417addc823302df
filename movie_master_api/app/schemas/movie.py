"""
Pydantic models for movie responses.

Movie bodies are open JSON objects (see ``schemas.document``), so only
the acknowledgement payloads returned by update and delete have a
fixed shape.
"""

from pydantic import BaseModel, Field


class MessageRead(BaseModel):
    """Acknowledgement returned by update operations."""

    message: str = Field(..., example="Updated")


class DeleteRead(BaseModel):
    """Acknowledgement returned by delete operations."""

    success: bool = Field(True, example=True)
    message: str = Field(..., example="Deleted")
