# src/discusspedia/api/v1/endpoints/questionnaires.py
"""Questionnaire endpoints for the Discusspedia API."""

from fastapi import APIRouter, Query, status

from discusspedia.api.v1.dependencies import (
    CurrentUserDep,
    ModerationGateDep,
    SessionDep,
    ViewerDep,
    to_http_exception,
)
from discusspedia.core.errors import DiscusspediaError
from discusspedia.repositories.category_repo import CategoryRepository
from discusspedia.repositories.questionnaire_repo import QuestionnaireRepository
from discusspedia.schemas.common import CreatedResponse, MessageResponse
from discusspedia.schemas.questionnaire import QuestionnaireResponse, QuestionnaireWrite
from discusspedia.services import questionnaire_service
from discusspedia.services.feed_query import parse_feed_query, parse_page

router = APIRouter(prefix="/questionnaires", tags=["questionnaires"])


@router.get("/", response_model=list[QuestionnaireResponse])
async def list_questionnaires(
    db: SessionDep,
    viewer: ViewerDep,
    sort_by: str = Query("newest"),
    search_title: str = Query(""),
    category_id: str = Query("0"),
    me: str = Query("false"),
    limit: str | None = Query(None),
    offset: str = Query("0"),
) -> list[QuestionnaireResponse]:
    """List questionnaires; accepts the same parameters as the post feed."""
    try:
        query = parse_feed_query(
            viewer,
            sort_by=sort_by,
            search_title=search_title,
            category_id=category_id,
            me=me,
        )
        page = parse_page(limit, offset)
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    return questionnaire_service.list_questionnaires(QuestionnaireRepository(db), query, page, viewer)


@router.get("/{questionnaire_id}", response_model=QuestionnaireResponse)
async def get_questionnaire(
    questionnaire_id: int,
    db: SessionDep,
    viewer: ViewerDep,
) -> QuestionnaireResponse:
    """Get a specific questionnaire by its post ID."""
    try:
        return questionnaire_service.get_questionnaire(
            QuestionnaireRepository(db), questionnaire_id, viewer
        )
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_questionnaire(
    payload: QuestionnaireWrite,
    current_user: CurrentUserDep,
    db: SessionDep,
    gate: ModerationGateDep,
) -> CreatedResponse:
    """Create a questionnaire authored by the caller."""
    try:
        questionnaire_id = questionnaire_service.create_questionnaire(
            repo=QuestionnaireRepository(db),
            categories=CategoryRepository(db),
            gate=gate,
            author_id=current_user.id,
            payload=payload,
        )
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    return CreatedResponse(id=questionnaire_id, message="Add Questionnaire Successful")


@router.put("/{questionnaire_id}", response_model=MessageResponse)
async def update_questionnaire(
    questionnaire_id: int,
    payload: QuestionnaireWrite,
    current_user: CurrentUserDep,
    db: SessionDep,
    gate: ModerationGateDep,
) -> MessageResponse:
    """Update the caller's questionnaire.

    Raises:
        HTTPException: 404 if it does not exist, 403 if the caller is not its
            author, 400 if the text is rejected by moderation
    """
    try:
        questionnaire_service.update_questionnaire(
            repo=QuestionnaireRepository(db),
            categories=CategoryRepository(db),
            gate=gate,
            post_id=questionnaire_id,
            user_id=current_user.id,
            payload=payload,
        )
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    return MessageResponse(message="Update Questionnaire Successful")


@router.delete("/{questionnaire_id}", response_model=MessageResponse)
async def delete_questionnaire(
    questionnaire_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete the caller's questionnaire."""
    try:
        questionnaire_service.delete_questionnaire(
            repo=QuestionnaireRepository(db),
            post_id=questionnaire_id,
            user_id=current_user.id,
        )
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    return MessageResponse(message="Delete Questionnaire Successful")
