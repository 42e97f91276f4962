# src/discusspedia/api/v1/endpoints/posts.py
"""Post-related endpoints for the Discusspedia API."""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Query, Response, UploadFile, status

from discusspedia.api.v1.dependencies import (
    CurrentUserDep,
    ImageStorageDep,
    ModerationGateDep,
    SessionDep,
    ViewerDep,
    to_http_exception,
)
from discusspedia.core.errors import DiscusspediaError
from discusspedia.repositories.category_repo import CategoryRepository
from discusspedia.repositories.post_repo import PostRepository
from discusspedia.schemas.common import CreatedResponse, MessageResponse
from discusspedia.schemas.post import (
    ImageUploadFailure,
    ImageUploadResponse,
    PostImageResponse,
    PostResponse,
    PostWrite,
)
from discusspedia.services import post_service
from discusspedia.services.feed_query import parse_feed_query, parse_page
from discusspedia.services.image_upload import UNSUPPORTED_FILE_TYPE, upload_post_images
from discusspedia.services.ownership import ensure_owner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    db: SessionDep,
    viewer: ViewerDep,
    sort_by: str = Query("newest", description="newest, oldest, most_liked or most_commented"),
    search_title: str = Query("", description="Case-insensitive substring of the title"),
    category_id: str = Query("0", description="Restrict to a category; 0 means all"),
    me: str = Query("false", description="Only posts written by the caller"),
    limit: str | None = Query(None, description="Maximum number of posts to return"),
    offset: str = Query("0", description="Number of posts to skip"),
) -> list[PostResponse]:
    """List posts with their authors, counts and images.

    Query values are parsed by hand so each malformed parameter gets its own
    error message. Questionnaires are not part of this feed.

    Returns:
        Posts in the requested order, one entry per post.

    Raises:
        HTTPException: 400 for malformed parameters, 401 for ``me=true`` without
            a valid token.
    """
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

    return post_service.list_posts(PostRepository(db), query, page, viewer)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    db: SessionDep,
    viewer: ViewerDep,
) -> PostResponse:
    """Get a specific post by ID, including all of its images.

    Raises:
        HTTPException: If the post does not exist
    """
    try:
        return post_service.get_post(PostRepository(db), post_id, viewer)
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc


@router.post("/", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostWrite,
    current_user: CurrentUserDep,
    db: SessionDep,
    gate: ModerationGateDep,
) -> CreatedResponse:
    """Create a new post authored by the caller.

    Raises:
        HTTPException: 400 if the text is rejected by moderation, 404 if the
            category does not exist
    """
    try:
        post_id = post_service.create_post(
            repo=PostRepository(db),
            categories=CategoryRepository(db),
            gate=gate,
            author_id=current_user.id,
            payload=payload,
        )
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    return CreatedResponse(id=post_id, message="Post Created")


@router.put("/{post_id}", response_model=MessageResponse)
async def update_post(
    post_id: int,
    payload: PostWrite,
    current_user: CurrentUserDep,
    db: SessionDep,
    gate: ModerationGateDep,
) -> MessageResponse:
    """Update the category, title and description of the caller's post.

    Raises:
        HTTPException: 404 if the post does not exist, 403 if the caller is not
            its author, 400 if the text is rejected by moderation
    """
    try:
        post_service.update_post(
            repo=PostRepository(db),
            categories=CategoryRepository(db),
            gate=gate,
            post_id=post_id,
            user_id=current_user.id,
            payload=payload,
        )
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    return MessageResponse(message="Post Updated")


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete the caller's post and its images.

    Raises:
        HTTPException: 404 if the post does not exist, 403 if the caller is not its author
    """
    try:
        post_service.delete_post(repo=PostRepository(db), post_id=post_id, user_id=current_user.id)
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    return MessageResponse(message="Post Deleted")


@router.post("/{post_id}/images", response_model=ImageUploadResponse)
async def upload_images(
    post_id: int,
    images: Annotated[list[UploadFile], File(description="Image files to attach")],
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: ImageStorageDep,
    response: Response,
) -> ImageUploadResponse:
    """Attach images to the caller's post.

    Each file is stored and recorded independently. Files that fail are
    listed in ``failed`` and do not undo the ones that succeeded; the request
    fails only when no file could be uploaded: 400 if every file had
    an unsupported type, 500 otherwise.
    """
    repo = PostRepository(db)
    try:
        ensure_owner(repo, post_id, current_user.id, resource="Post")
    except DiscusspediaError as exc:
        raise to_http_exception(exc) from exc

    outcomes = await upload_post_images(post_id, images, storage=storage, recorder=repo)

    uploaded = [
        PostImageResponse(id=outcome.image_id, url=outcome.path)
        for outcome in outcomes
        if outcome.ok
    ]
    failed = [
        ImageUploadFailure(filename=outcome.filename, error=outcome.error)
        for outcome in outcomes
        if not outcome.ok
    ]

    if not failed:
        message = "Post Images Uploaded"
    elif uploaded:
        message = "Some Post Images Failed To Upload"
        logger.warning("%d of %d images failed for post %s", len(failed), len(outcomes), post_id)
    else:
        message = "Post Images Upload Failed"
        if all(outcome.error == UNSUPPORTED_FILE_TYPE for outcome in outcomes):
            response.status_code = status.HTTP_400_BAD_REQUEST
        else:
            response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return ImageUploadResponse(message=message, uploaded=uploaded, failed=failed)
