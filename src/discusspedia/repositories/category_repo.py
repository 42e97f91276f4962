"""Read-only access to post categories."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from discusspedia.db.session import unit_of_work
from discusspedia.models import Category

__all__ = ["CategoryRepository"]


class CategoryRepository:
    """Lookups used to validate the category of a new or edited post."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(self, category_id: int) -> bool:
        """Return True if a category with this id exists."""
        with unit_of_work(self.session):
            found = self.session.execute(
                select(Category.id).where(Category.id == category_id)
            ).scalar_one_or_none()
        return found is not None
