"""Query fragments shared by the post and questionnaire stores.

Both feeds select the same author, count and viewer columns; only the
questionnaire join and the image join differ.
"""
from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import ColumnElement, Delete, Subquery, delete, exists, func, select

from discusspedia.models import Comment, Post, PostImage, PostLike, Questionnaire, User, UserDetail
from discusspedia.services.feed_query import FeedFilter, SortOrder

__all__ = [
    "author_columns",
    "child_row_deletes",
    "comment_counts",
    "filter_clauses",
    "like_counts",
    "order_clauses",
    "viewer_likes",
]


def comment_counts() -> Subquery:
    """Comments per post, grouped once so other joins cannot multiply them."""
    return (
        select(Comment.post_id, func.count(Comment.id).label("comment_count"))
        .group_by(Comment.post_id)
        .subquery("comment_counts")
    )


def like_counts() -> Subquery:
    """Distinct likers per post."""
    return (
        select(
            PostLike.post_id,
            func.count(func.distinct(PostLike.user_id)).label("like_count"),
        )
        .group_by(PostLike.post_id)
        .subquery("like_counts")
    )


def viewer_likes(viewer_id: int) -> ColumnElement[bool]:
    """Whether ``viewer_id`` liked the post on the current row."""
    return exists().where(
        PostLike.post_id == Post.id,
        PostLike.user_id == viewer_id,
    ).label("is_like")


def author_columns() -> list[ColumnElement]:
    """Author and profile columns; profile values are null without a detail row."""
    return [
        User.id.label("author_id"),
        User.name.label("author_name"),
        User.role.label("author_role"),
        User.avatar.label("author_avatar"),
        UserDetail.institute.label("author_institute"),
        UserDetail.major.label("author_major"),
        UserDetail.batch.label("author_batch"),
    ]


def filter_clauses(feed_filter: FeedFilter) -> list[ColumnElement[bool]]:
    """Translate a parsed filter into bound-parameter predicates on ``posts``."""
    clauses: list[ColumnElement[bool]] = []
    if feed_filter.search_title:
        # autoescape keeps % and _ in user input literal.
        clauses.append(Post.title.icontains(feed_filter.search_title, autoescape=True))
    if feed_filter.category_id is not None:
        clauses.append(Post.category_id == feed_filter.category_id)
    if feed_filter.author_id is not None:
        clauses.append(Post.author_id == feed_filter.author_id)
    return clauses


def order_clauses(sort: SortOrder, columns: Mapping[str, ColumnElement]) -> list[ColumnElement]:
    """Return ORDER BY terms for ``sort`` over ``columns``.

    ``columns`` must expose ``id`` plus the sort key, either as expressions of
    the inner page query or as columns of the page subquery. Post id breaks
    ties in the same direction so the order is total.
    """
    key = columns[sort.key]
    post_id = columns["id"]
    if sort.descending:
        return [key.desc(), post_id.desc()]
    return [key.asc(), post_id.asc()]


def child_row_deletes(post_id: int) -> list[Delete]:
    """DELETE statements for every row that hangs off ``post_id``.

    Run them before deleting the post itself. SQLite does not enforce the
    ``ON DELETE CASCADE`` foreign keys by default and reuses freed ids, so
    leftover likes or comments would attach to the next post.
    """
    return [
        delete(Comment).where(Comment.post_id == post_id),
        delete(PostLike).where(PostLike.post_id == post_id),
        delete(PostImage).where(PostImage.post_id == post_id),
        delete(Questionnaire).where(Questionnaire.post_id == post_id),
    ]
