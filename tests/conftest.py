# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"

from discusspedia.core.security import create_access_token
from discusspedia.db.session import Base, create_tables, drop_tables
from discusspedia.db.session import get_db as app_get_session
from discusspedia.main import app as fastapi_app
from discusspedia.models import (
    Category,
    Comment,
    Post,
    PostImage,
    PostLike,
    Questionnaire,
    User,
    UserDetail,
)
from discusspedia.services.storage import LocalImageStorage, get_image_storage

TEST_DB_URL = "sqlite://"

# Posts get strictly increasing timestamps so "newest" and "oldest" are deterministic.
_BASE_TIME = datetime(2024, 1, 1, 8, 0, 0)
_POST_CLOCK = count(0)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Repositories commit, so each test clears every table afterwards.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def media_root(tmp_path: Path) -> Path:
    return tmp_path / "media" / "post"


@pytest.fixture(autouse=True)
def override_image_storage(app: FastAPI, media_root: Path) -> Iterator[None]:
    app.dependency_overrides[get_image_storage] = lambda: LocalImageStorage(media_root)
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_image_storage, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create the primary user, with an academic profile."""
    user = User(name="Test User", role="student", avatar="media/avatar/test.png")
    user.detail = UserDetail(institute="Institut Teknologi", major="Informatics", batch=2021)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create a second user without a profile row."""
    user = User(name="Other User", role="teacher")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def category(db_session: Session) -> Category:
    category = Category(name="General")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture()
def other_category(db_session: Session) -> Category:
    category = Category(name="Campus Life")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture()
def make_post(db_session: Session, category: Category) -> Callable[..., Post]:
    """Return a factory that persists a post with optional images, likes and comments."""

    def _make_post(
        author: User,
        *,
        title: str = "A post",
        description: str = "Post body",
        category_id: int | None = None,
        images: int = 0,
        liked_by: tuple[User, ...] = (),
        comments: int = 0,
        link: str | None = None,
        reward: str | None = None,
    ) -> Post:
        post = Post(
            author_id=author.id,
            category_id=category_id or category.id,
            title=title,
            description=description,
            created_at=_BASE_TIME + timedelta(minutes=next(_POST_CLOCK)),
        )
        db_session.add(post)
        db_session.flush()
        for index in range(images):
            db_session.add(PostImage(post_id=post.id, path=f"media/post/{post.id}-{index}.png"))
        for liker in liked_by:
            db_session.add(PostLike(post_id=post.id, user_id=liker.id))
        for index in range(comments):
            db_session.add(Comment(post_id=post.id, author_id=author.id, comment=f"comment {index}"))
        if link is not None:
            db_session.add(Questionnaire(post_id=post.id, link=link, reward=reward))
        db_session.commit()
        return post

    return _make_post
