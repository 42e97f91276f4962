# src/discusspedia/models/category.py
"""SQLAlchemy model for post categories."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from discusspedia.db.session import Base


class Category(Base):
    """Topic bucket every post belongs to."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
