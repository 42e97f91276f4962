"""Data access helpers for questionnaires (posts that carry a form link)."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Row, Select, delete, func, select, update
from sqlalchemy.orm import Session

from discusspedia.db.session import unit_of_work
from discusspedia.models import Post, Questionnaire, User, UserDetail
from discusspedia.repositories.feed import (
    author_columns,
    child_row_deletes,
    comment_counts,
    filter_clauses,
    like_counts,
    order_clauses,
    viewer_likes,
)
from discusspedia.services.feed_query import FeedQuery, Page

__all__ = ["QuestionnaireRepository"]


class QuestionnaireRepository:
    """Questionnaire counterpart of :class:`PostRepository`.

    A questionnaire is addressed by its post id; the questionnaire row only
    adds ``link`` and ``reward``. There are no images on this surface, so
    each questionnaire is exactly one row.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _feed_select(self, viewer_id: int) -> tuple[Select, dict]:
        comments = comment_counts()
        likes = like_counts()
        comment_count = func.coalesce(comments.c.comment_count, 0)
        like_count = func.coalesce(likes.c.like_count, 0)

        stmt = (
            select(
                Post.id.label("id"),
                viewer_likes(viewer_id),
                *author_columns(),
                Post.category_id.label("category_id"),
                Post.title.label("title"),
                Post.description.label("description"),
                Questionnaire.link.label("link"),
                Questionnaire.reward.label("reward"),
                Post.created_at.label("created_at"),
                comment_count.label("comment_count"),
                like_count.label("like_count"),
            )
            .select_from(Post)
            .join(Questionnaire, Questionnaire.post_id == Post.id)
            .join(User, User.id == Post.author_id)
            .outerjoin(UserDetail, UserDetail.user_id == User.id)
            .outerjoin(comments, comments.c.post_id == Post.id)
            .outerjoin(likes, likes.c.post_id == Post.id)
            .where(Questionnaire.link.is_not(None))
        )
        sortable = {
            "id": Post.id,
            "created_at": Post.created_at,
            "comment_count": comment_count,
            "like_count": like_count,
        }
        return stmt, sortable

    def list_feed(self, query: FeedQuery, page: Page, viewer_id: int) -> Sequence[Row]:
        """Return a page of questionnaires, one row each."""
        stmt, sortable = self._feed_select(viewer_id)
        stmt = (
            stmt.where(*filter_clauses(query.filter))
            .order_by(*order_clauses(query.sort, sortable))
            .limit(page.limit)
            .offset(page.offset)
        )
        with unit_of_work(self.session):
            return self.session.execute(stmt).all()

    def get_detail(self, post_id: int, viewer_id: int) -> Sequence[Row]:
        """Return the rows for one questionnaire; empty when it does not exist."""
        stmt, _ = self._feed_select(viewer_id)
        with unit_of_work(self.session):
            return self.session.execute(stmt.where(Post.id == post_id)).all()

    def create(
        self,
        *,
        author_id: int,
        category_id: int,
        title: str,
        description: str,
        link: str,
        reward: str,
    ) -> int:
        """Insert the post row and its questionnaire row together; return the post id."""
        with unit_of_work(self.session):
            post = Post(
                author_id=author_id,
                category_id=category_id,
                title=title,
                description=description,
            )
            self.session.add(post)
            self.session.flush()
            self.session.add(Questionnaire(post_id=post.id, link=link, reward=reward))
            self.session.flush()
            return post.id

    def author_of(self, post_id: int) -> int | None:
        """Return the author id of a questionnaire, or None if there is none with this id."""
        with unit_of_work(self.session):
            return self.session.execute(
                select(Post.author_id)
                .join(Questionnaire, Questionnaire.post_id == Post.id)
                .where(Post.id == post_id, Questionnaire.link.is_not(None))
            ).scalar_one_or_none()

    def update(
        self,
        post_id: int,
        *,
        category_id: int,
        title: str,
        description: str,
        link: str,
        reward: str,
    ) -> bool:
        with unit_of_work(self.session):
            result = self.session.execute(
                update(Post)
                .where(Post.id == post_id)
                .values(category_id=category_id, title=title, description=description)
            )
            self.session.execute(
                update(Questionnaire)
                .where(Questionnaire.post_id == post_id)
                .values(link=link, reward=reward)
            )
            return result.rowcount > 0

    def delete(self, post_id: int) -> bool:
        """Delete the questionnaire row, its post row and everything attached to the post."""
        with unit_of_work(self.session):
            for statement in child_row_deletes(post_id):
                self.session.execute(statement)
            result = self.session.execute(delete(Post).where(Post.id == post_id))
            return result.rowcount > 0
