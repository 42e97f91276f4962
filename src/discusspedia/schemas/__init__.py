# src/discusspedia/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import AuthorResponse, CreatedResponse, MessageResponse
from .post import (
    ImageUploadFailure,
    ImageUploadResponse,
    PostImageResponse,
    PostResponse,
    PostWrite,
)
from .questionnaire import QuestionnaireResponse, QuestionnaireWrite

__all__ = [
    "AuthorResponse", "CreatedResponse", "MessageResponse",
    "ImageUploadFailure", "ImageUploadResponse",
    "PostImageResponse", "PostResponse", "PostWrite",
    "QuestionnaireResponse", "QuestionnaireWrite",
]
