"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Row, Select, delete, func, select, update
from sqlalchemy.orm import Session

from discusspedia.db.session import unit_of_work
from discusspedia.models import Post, PostImage, Questionnaire, User, UserDetail
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

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities.

    Every public method is its own unit of work.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def _feed_select(self, viewer_id: int) -> tuple[Select, dict]:
        """Return the post/author/count select and its sortable expressions."""
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
                Post.created_at.label("created_at"),
                comment_count.label("comment_count"),
                like_count.label("like_count"),
            )
            .select_from(Post)
            .join(User, User.id == Post.author_id)
            .outerjoin(UserDetail, UserDetail.user_id == User.id)
            .outerjoin(comments, comments.c.post_id == Post.id)
            .outerjoin(likes, likes.c.post_id == Post.id)
        )
        sortable = {
            "id": Post.id,
            "created_at": Post.created_at,
            "comment_count": comment_count,
            "like_count": like_count,
        }
        return stmt, sortable

    def list_feed(self, query: FeedQuery, page: Page, viewer_id: int) -> Sequence[Row]:
        """Return one row per (post, image) for a page of the generic feed.

        The page is cut from the post set before images are joined, so a post
        with many images never pushes other posts off the page.

        Args:
            query: Parsed sort order and filter.
            page: Limit/offset window over posts.
            viewer_id: Identity used for the ``is_like`` flag.
        """
        stmt, sortable = self._feed_select(viewer_id)
        posts = (
            stmt.outerjoin(Questionnaire, Questionnaire.post_id == Post.id)
            .where(Questionnaire.link.is_(None), *filter_clauses(query.filter))
            .order_by(*order_clauses(query.sort, sortable))
            .limit(page.limit)
            .offset(page.offset)
            .subquery("page")
        )
        rows_stmt = (
            select(
                posts,
                PostImage.id.label("image_id"),
                PostImage.path.label("image_path"),
            )
            .select_from(posts)
            .outerjoin(PostImage, PostImage.post_id == posts.c.id)
            .order_by(*order_clauses(query.sort, posts.c), PostImage.id)
        )
        with unit_of_work(self.session):
            return self.session.execute(rows_stmt).all()

    def get_detail(self, post_id: int, viewer_id: int) -> Sequence[Row]:
        """Return every row for one post; an empty result means it does not exist."""
        stmt, _ = self._feed_select(viewer_id)
        post = stmt.where(Post.id == post_id).subquery("post")
        rows_stmt = (
            select(
                post,
                PostImage.id.label("image_id"),
                PostImage.path.label("image_path"),
            )
            .select_from(post)
            .outerjoin(PostImage, PostImage.post_id == post.c.id)
            .order_by(PostImage.id)
        )
        with unit_of_work(self.session):
            return self.session.execute(rows_stmt).all()

    def create(self, *, author_id: int, category_id: int, title: str, description: str) -> int:
        """Insert a new post and return its id."""
        with unit_of_work(self.session):
            post = Post(
                author_id=author_id,
                category_id=category_id,
                title=title,
                description=description,
            )
            self.session.add(post)
            self.session.flush()
            return post.id

    def add_image(self, post_id: int, path: str) -> int:
        """Record a stored image for a post and return the image id."""
        with unit_of_work(self.session):
            image = PostImage(post_id=post_id, path=path)
            self.session.add(image)
            self.session.flush()
            return image.id

    def author_of(self, post_id: int) -> int | None:
        """Return the author id of a plain post.

        None when the post does not exist or is a questionnaire, so post
        mutations and image uploads never reach questionnaire rows.
        """
        with unit_of_work(self.session):
            return self.session.execute(
                select(Post.author_id)
                .outerjoin(Questionnaire, Questionnaire.post_id == Post.id)
                .where(Post.id == post_id, Questionnaire.link.is_(None))
            ).scalar_one_or_none()

    def update(self, post_id: int, *, category_id: int, title: str, description: str) -> bool:
        """Overwrite the editable fields of a post; False if nothing matched."""
        with unit_of_work(self.session):
            result = self.session.execute(
                update(Post)
                .where(Post.id == post_id)
                .values(category_id=category_id, title=title, description=description)
            )
            return result.rowcount > 0

    def delete(self, post_id: int) -> bool:
        """Delete a post together with its images, likes and comments."""
        with unit_of_work(self.session):
            for statement in child_row_deletes(post_id):
                self.session.execute(statement)
            result = self.session.execute(delete(Post).where(Post.id == post_id))
            return result.rowcount > 0
