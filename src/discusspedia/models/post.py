# src/discusspedia/models/post.py
"""SQLAlchemy models for posts and their images."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from discusspedia.db.session import Base
from discusspedia.db.time import utcnow


class Post(Base):
    """Primary content entity produced by users.

    Questionnaires reuse this row and add a ``questionnaires`` record, so the
    generic feed has to exclude posts that carry a questionnaire link.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_author_id", "author_id"),
        Index("ix_posts_category_id", "category_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id"), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # Column name kept short to match the existing schema.
    description: Mapped[str] = mapped_column("desc", Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class PostImage(Base):
    """Stored image attached to a post; many per post."""

    __tablename__ = "post_images"
    __table_args__ = (Index("ix_post_images_post_id", "post_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    path: Mapped[str] = mapped_column(Text, nullable=False)
