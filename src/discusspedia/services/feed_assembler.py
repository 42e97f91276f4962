"""Fold flattened feed rows into API responses.

The stores return one row per (post, image) pair, or a single row with null
image columns for a post without images. These helpers collapse them into
one entry per post, keeping the order in which posts first appear.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from discusspedia.core.security import Viewer
from discusspedia.db.time import format_timestamp
from discusspedia.schemas.common import AuthorResponse
from discusspedia.schemas.post import PostImageResponse, PostResponse
from discusspedia.schemas.questionnaire import QuestionnaireResponse
from discusspedia.utils.grouping import group_by_key

__all__ = [
    "assemble_post",
    "assemble_posts",
    "assemble_questionnaires",
    "author_from_row",
]


def author_from_row(row: Any) -> AuthorResponse:
    """Build the author block, defaulting absent profile fields to empty values."""
    return AuthorResponse(
        id=row.author_id,
        name=row.author_name,
        role=row.author_role,
        institute=row.author_institute or "",
        major=row.author_major or "",
        batch=row.author_batch or 0,
        profile_image=row.author_avatar or "",
    )


def _images(rows: Iterable[Any]) -> list[PostImageResponse]:
    return [
        PostImageResponse(id=row.image_id, url=row.image_path)
        for row in rows
        if row.image_id is not None
    ]


def _post_from_rows(rows: list[Any], viewer: Viewer) -> PostResponse:
    # Scalars come from the first row; later rows only contribute images.
    first = rows[0]
    return PostResponse(
        id=first.id,
        is_like=bool(first.is_like) and viewer.authenticated,
        is_author=viewer.owns(first.author_id),
        author=author_from_row(first),
        category_id=first.category_id,
        title=first.title,
        description=first.description,
        created_at=format_timestamp(first.created_at),
        comment_count=first.comment_count or 0,
        like_count=first.like_count or 0,
        images=_images(rows),
    )


def assemble_posts(rows: Iterable[Any], viewer: Viewer) -> list[PostResponse]:
    """Collapse feed rows into one :class:`PostResponse` per post.

    Args:
        rows: Store rows in feed order, possibly several per post.
        viewer: Identity the viewer-relative flags are computed for.

    Returns:
        Posts in first-seen order, each with its full (possibly empty) image list.
    """
    return [_post_from_rows(group.rows, viewer) for group in group_by_key(rows, lambda row: row.id)]


def assemble_post(rows: Iterable[Any], viewer: Viewer) -> PostResponse | None:
    """Collapse the rows of a detail query; None when there are no rows."""
    posts = assemble_posts(rows, viewer)
    return posts[0] if posts else None


def assemble_questionnaires(rows: Iterable[Any], viewer: Viewer) -> list[QuestionnaireResponse]:
    """Build questionnaire entries, one per distinct post id in first-seen order."""
    entries: list[QuestionnaireResponse] = []
    for group in group_by_key(rows, lambda row: row.id):
        first = group.first
        entries.append(
            QuestionnaireResponse(
                id=first.id,
                is_like=bool(first.is_like) and viewer.authenticated,
                is_author=viewer.owns(first.author_id),
                author=author_from_row(first),
                category_id=first.category_id,
                title=first.title,
                description=first.description,
                link=first.link,
                reward=first.reward or "",
                created_at=format_timestamp(first.created_at),
                comment_count=first.comment_count or 0,
                like_count=first.like_count or 0,
            )
        )
    return entries
