"""Service-level helpers for reading and writing questionnaires."""
from __future__ import annotations

import logging

from discusspedia.core.errors import NotFoundError
from discusspedia.core.security import Viewer
from discusspedia.repositories.category_repo import CategoryRepository
from discusspedia.repositories.questionnaire_repo import QuestionnaireRepository
from discusspedia.schemas.questionnaire import QuestionnaireResponse, QuestionnaireWrite
from discusspedia.services.feed_assembler import assemble_questionnaires
from discusspedia.services.feed_query import FeedQuery, Page
from discusspedia.services.moderation import ModerationGate, ensure_acceptable
from discusspedia.services.ownership import ensure_owner

logger = logging.getLogger(__name__)


def list_questionnaires(
    repo: QuestionnaireRepository,
    query: FeedQuery,
    page: Page,
    viewer: Viewer,
) -> list[QuestionnaireResponse]:
    """Return one page of the questionnaire feed for ``viewer``."""
    return assemble_questionnaires(repo.list_feed(query, page, viewer.user_id), viewer)


def get_questionnaire(repo: QuestionnaireRepository, post_id: int, viewer: Viewer) -> QuestionnaireResponse:
    """Return a single questionnaire or raise NotFoundError."""
    entries = assemble_questionnaires(repo.get_detail(post_id, viewer.user_id), viewer)
    if not entries:
        raise NotFoundError("Questionnaire")
    return entries[0]


def create_questionnaire(
    *,
    repo: QuestionnaireRepository,
    categories: CategoryRepository,
    gate: ModerationGate,
    author_id: int,
    payload: QuestionnaireWrite,
) -> int:
    """Create a questionnaire after moderating its text; return its id."""
    ensure_acceptable(gate, payload.title, payload.description)
    if not categories.exists(payload.category_id):
        raise NotFoundError("Category")
    post_id = repo.create(
        author_id=author_id,
        category_id=payload.category_id,
        title=payload.title,
        description=payload.description,
        link=payload.link,
        reward=payload.reward,
    )
    logger.info("User %s created questionnaire %s", author_id, post_id)
    return post_id


def update_questionnaire(
    *,
    repo: QuestionnaireRepository,
    categories: CategoryRepository,
    gate: ModerationGate,
    post_id: int,
    user_id: int,
    payload: QuestionnaireWrite,
) -> None:
    ensure_owner(repo, post_id, user_id, resource="Questionnaire")
    ensure_acceptable(gate, payload.title, payload.description)
    if not categories.exists(payload.category_id):
        raise NotFoundError("Category")
    if not repo.update(
        post_id,
        category_id=payload.category_id,
        title=payload.title,
        description=payload.description,
        link=payload.link,
        reward=payload.reward,
    ):
        raise NotFoundError("Questionnaire")


def delete_questionnaire(*, repo: QuestionnaireRepository, post_id: int, user_id: int) -> None:
    ensure_owner(repo, post_id, user_id, resource="Questionnaire")
    if not repo.delete(post_id):
        raise NotFoundError("Questionnaire")
    logger.info("User %s deleted questionnaire %s", user_id, post_id)
