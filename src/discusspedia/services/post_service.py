"""Service-level helpers for reading and writing posts."""
from __future__ import annotations

import logging

from discusspedia.core.errors import NotFoundError
from discusspedia.core.security import Viewer
from discusspedia.repositories.category_repo import CategoryRepository
from discusspedia.repositories.post_repo import PostRepository
from discusspedia.schemas.post import PostResponse, PostWrite
from discusspedia.services.feed_assembler import assemble_post, assemble_posts
from discusspedia.services.feed_query import FeedQuery, Page
from discusspedia.services.moderation import ModerationGate, ensure_acceptable
from discusspedia.services.ownership import ensure_owner

logger = logging.getLogger(__name__)


def list_posts(repo: PostRepository, query: FeedQuery, page: Page, viewer: Viewer) -> list[PostResponse]:
    """Return one page of the generic post feed for ``viewer``."""
    rows = repo.list_feed(query, page, viewer.user_id)
    return assemble_posts(rows, viewer)


def get_post(repo: PostRepository, post_id: int, viewer: Viewer) -> PostResponse:
    """Return a single post with its images.

    Raises:
        NotFoundError: If no post has this id.
    """
    post = assemble_post(repo.get_detail(post_id, viewer.user_id), viewer)
    if post is None:
        raise NotFoundError("Post")
    return post


def _ensure_category(categories: CategoryRepository, category_id: int) -> None:
    if not categories.exists(category_id):
        raise NotFoundError("Category")


def create_post(
    *,
    repo: PostRepository,
    categories: CategoryRepository,
    gate: ModerationGate,
    author_id: int,
    payload: PostWrite,
) -> int:
    """Create a post after moderating its text.

    Args:
        repo: Repository used to persist the post.
        categories: Used to check the category exists.
        gate: Moderation gate applied to title and description.
        author_id: Authenticated author.
        payload: Validated request body.

    Returns:
        The new post id.

    Raises:
        ContentRejectedError: If the title or description is rejected.
        NotFoundError: If the category does not exist.
    """
    ensure_acceptable(gate, payload.title, payload.description)
    _ensure_category(categories, payload.category_id)
    post_id = repo.create(
        author_id=author_id,
        category_id=payload.category_id,
        title=payload.title,
        description=payload.description,
    )
    logger.info("User %s created post %s", author_id, post_id)
    return post_id


def update_post(
    *,
    repo: PostRepository,
    categories: CategoryRepository,
    gate: ModerationGate,
    post_id: int,
    user_id: int,
    payload: PostWrite,
) -> None:
    """Overwrite a post owned by ``user_id``."""
    ensure_owner(repo, post_id, user_id, resource="Post")
    ensure_acceptable(gate, payload.title, payload.description)
    _ensure_category(categories, payload.category_id)
    if not repo.update(
        post_id,
        category_id=payload.category_id,
        title=payload.title,
        description=payload.description,
    ):
        # Deleted between the ownership check and the update.
        raise NotFoundError("Post")


def delete_post(*, repo: PostRepository, post_id: int, user_id: int) -> None:
    """Delete a post owned by ``user_id`` along with its images."""
    ensure_owner(repo, post_id, user_id, resource="Post")
    if not repo.delete(post_id):
        raise NotFoundError("Post")
    logger.info("User %s deleted post %s", user_id, post_id)
