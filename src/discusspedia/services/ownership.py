"""Shared ownership check for mutating posts and questionnaires."""
from __future__ import annotations

import logging
from typing import Protocol

from discusspedia.core.errors import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


class AuthoredStore(Protocol):
    """Store able to report who wrote a resource."""

    def author_of(self, resource_id: int) -> int | None: ...


def ensure_owner(store: AuthoredStore, resource_id: int, user_id: int, *, resource: str = "Post") -> None:
    """Check that ``user_id`` may mutate ``resource_id``.

    Existence is checked first: ownership cannot be evaluated without a resource.

    Raises:
        NotFoundError: If the store has no such resource.
        ForbiddenError: If the resource belongs to someone else.
    """
    author_id = store.author_of(resource_id)
    if author_id is None:
        raise NotFoundError(resource)
    if author_id != user_id:
        logger.info("User %s denied access to %s %s", user_id, resource.lower(), resource_id)
        raise ForbiddenError(f"You are not the owner of this {resource.lower()}")
