# src/discusspedia/models/questionnaire.py
"""SQLAlchemy model for questionnaire link records."""

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from discusspedia.db.session import Base


class Questionnaire(Base):
    """Link-sharing extension of a post.

    The post row carries author, category, title and description; this row
    adds the external form link and an optional reward.
    """

    __tablename__ = "questionnaires"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    reward: Mapped[str | None] = mapped_column(Text, nullable=True)
