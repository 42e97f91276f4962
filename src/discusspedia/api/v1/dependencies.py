"""Shared API dependencies for authentication and injected services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from discusspedia.core.errors import (
    AuthenticationRequiredError,
    DiscusspediaError,
    ForbiddenError,
    InvalidQueryError,
    NotFoundError,
)
from discusspedia.core.security import IdentityResolver, Viewer, get_identity_resolver
from discusspedia.db.session import get_db
from discusspedia.models import User
from discusspedia.services.moderation import ModerationGate, get_moderation_gate
from discusspedia.services.storage import ImageStorage, get_image_storage

# Bearer scheme that tolerates a missing header; endpoints decide if identity is required.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
IdentityResolverDep = Annotated[IdentityResolver, Depends(get_identity_resolver)]
ModerationGateDep = Annotated[ModerationGate, Depends(get_moderation_gate)]
ImageStorageDep = Annotated[ImageStorage, Depends(get_image_storage)]


def get_viewer(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    resolver: IdentityResolverDep,
) -> Viewer:
    """Resolve the caller, falling back to the anonymous viewer.

    Missing, malformed and expired tokens all yield the anonymous viewer so
    read endpoints keep working for logged-out users.
    """
    token = credentials.credentials if credentials is not None else None
    return resolver.viewer(token)


ViewerDep = Annotated[Viewer, Depends(get_viewer)]


def get_current_user(viewer: ViewerDep, db: SessionDep) -> User:
    """Get the current authenticated user.

    Args:
        viewer: Identity resolved from the bearer token
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If the token is missing or invalid, or the user no longer exists
    """
    if not viewer.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    user = db.get(User, viewer.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def to_http_exception(exc: DiscusspediaError) -> HTTPException:
    """Map a domain error onto the HTTP status the API reports for it."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, AuthenticationRequiredError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
    if isinstance(exc, InvalidQueryError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    # Moderation rejections and any other malformed input.
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
