# src/discusspedia/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .posts import router as posts_router
from .questionnaires import router as questionnaires_router

__all__ = [
    "posts_router",
    "questionnaires_router",
]
