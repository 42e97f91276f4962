"""Domain exceptions raised below the HTTP layer.

Endpoints translate these into ``HTTPException`` instances; nothing in the
services or repositories knows about status codes.
"""

from __future__ import annotations


class DiscusspediaError(Exception):
    """Base class for expected, client-facing failures."""


class InvalidQueryError(DiscusspediaError):
    """A query-string parameter could not be parsed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class AuthenticationRequiredError(DiscusspediaError):
    """The operation needs a resolved identity but the caller is anonymous."""


class ContentRejectedError(DiscusspediaError):
    """Free text failed the content-moderation gate."""


class NotFoundError(DiscusspediaError):
    """The addressed resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} Not Found")
        self.resource = resource


class ForbiddenError(DiscusspediaError):
    """The caller is authenticated but does not own the resource."""
