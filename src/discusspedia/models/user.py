# src/discusspedia/models/user.py
"""SQLAlchemy models for forum members and their profile details."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from discusspedia.db.session import Base


class User(Base):
    """Registered forum member.

    Accounts are created by the auth service; this backend only reads them to
    decorate posts with author information.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # e.g. "student", "teacher"; free text owned by the auth service.
    role: Mapped[str] = mapped_column(Text, nullable=False)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)

    detail: Mapped[UserDetail | None] = relationship(
        "UserDetail",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )


class UserDetail(Base):
    """Optional academic profile attached to a user."""

    __tablename__ = "user_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    institute: Mapped[str | None] = mapped_column(Text, nullable=True)
    major: Mapped[str | None] = mapped_column(Text, nullable=True)
    batch: Mapped[int | None] = mapped_column(Integer, nullable=True)

    user: Mapped[User] = relationship("User", back_populates="detail")
