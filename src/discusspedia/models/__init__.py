# src/discusspedia/models/__init__.py
"""SQLAlchemy models for the Discusspedia application."""

from .category import Category
from .comment import Comment
from .like import PostLike
from .post import Post, PostImage
from .questionnaire import Questionnaire
from .user import User, UserDetail

__all__ = [
    "Category",
    "Comment",
    "PostLike",
    "Post", "PostImage",
    "Questionnaire",
    "User", "UserDetail",
]
