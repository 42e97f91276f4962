"""JWT helpers and the token identity resolver."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from discusspedia.core.settings import settings

logger = logging.getLogger(__name__)

# User ids are positive autoincrement keys, so 0 never matches an author or liker.
ANONYMOUS_USER_ID = 0


@dataclass(frozen=True)
class Viewer:
    """Identity of the caller as seen by read endpoints."""

    user_id: int
    authenticated: bool

    def owns(self, author_id: int) -> bool:
        """Return True if this viewer authored a resource owned by ``author_id``."""
        return self.authenticated and self.user_id == author_id


ANONYMOUS = Viewer(user_id=ANONYMOUS_USER_ID, authenticated=False)


def create_access_token(user_id: int, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token whose subject is the user id."""
    to_encode: dict[str, object] = {"sub": str(user_id)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


class IdentityResolver:
    """Decode bearer credentials into user ids.

    Failures never raise: they resolve to the anonymous sentinel so endpoints
    that tolerate anonymous access can proceed.
    """

    def __init__(self, secret_key: str, algorithm: str) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm

    def resolve(self, credential: str | None) -> tuple[int, bool]:
        """Return ``(user_id, ok)`` for a raw token string.

        Args:
            credential: The bearer token without its scheme, or None.

        Returns:
            The decoded user id and True, or ``(ANONYMOUS_USER_ID, False)`` when
            the credential is absent, malformed, expired or lacks a numeric subject.
        """
        if not credential:
            return ANONYMOUS_USER_ID, False
        try:
            payload = jwt.decode(credential, self.secret_key, algorithms=[self.algorithm])
        except JWTError as err:
            logger.debug("Rejected bearer token: %s", err)
            return ANONYMOUS_USER_ID, False

        subject = payload.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            return ANONYMOUS_USER_ID, False
        if user_id <= 0:
            return ANONYMOUS_USER_ID, False
        return user_id, True

    def viewer(self, credential: str | None) -> Viewer:
        """Resolve a credential into a :class:`Viewer`."""
        user_id, ok = self.resolve(credential)
        return Viewer(user_id=user_id, authenticated=ok)


def get_identity_resolver() -> IdentityResolver:
    """Return a resolver configured from application settings."""
    return IdentityResolver(settings.secret_key, settings.jwt_algorithm)
