"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Acknowledgement returned by mutating endpoints."""

    message: str = Field(..., description="Human-readable outcome.")


class CreatedResponse(MessageResponse):
    """Acknowledgement that also carries the new resource id."""

    id: int = Field(..., description="Identifier of the created resource.")


class AuthorResponse(BaseModel):
    """Author block embedded in feed entries.

    Profile fields are never null; missing values are rendered as ``""`` or ``0``
    so every entry has the same shape.
    """

    id: int
    name: str
    role: str
    institute: str = ""
    major: str = ""
    batch: int = 0
    profile_image: str = ""
