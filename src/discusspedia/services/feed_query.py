"""Parsing of feed query-string parameters into sort and filter values.

Everything here works on raw strings so that each malformed parameter gets its
own client error instead of a generic validation failure.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from discusspedia.core.errors import AuthenticationRequiredError, InvalidQueryError
from discusspedia.core.security import Viewer
from discusspedia.core.settings import settings

# Spellings accepted for boolean flags; existing clients send all of these.
_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_RE = re.compile(r"[+-]?[0-9]+")


class SortOrder(str, Enum):
    """Supported feed orderings."""

    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_LIKED = "most_liked"
    MOST_COMMENTED = "most_commented"

    @property
    def key(self) -> str:
        """Name of the feed column this ordering sorts on."""
        return _SORT_KEYS[self]

    @property
    def descending(self) -> bool:
        """True when larger keys come first."""
        return self is not SortOrder.OLDEST


_SORT_KEYS = {
    SortOrder.NEWEST: "created_at",
    SortOrder.OLDEST: "created_at",
    SortOrder.MOST_LIKED: "like_count",
    SortOrder.MOST_COMMENTED: "comment_count",
}


@dataclass(frozen=True)
class FeedFilter:
    """Predicate over posts; ``None`` fields do not restrict."""

    search_title: str = ""
    category_id: int | None = None
    author_id: int | None = None


@dataclass(frozen=True)
class FeedQuery:
    """Parsed sort order and filter for a feed request."""

    sort: SortOrder = SortOrder.NEWEST
    filter: FeedFilter = FeedFilter()


@dataclass(frozen=True)
class Page:
    """Limit/offset window over the post set."""

    limit: int
    offset: int = 0


def parse_bool(raw: str, field: str, message: str) -> bool:
    """Parse a boolean query value, raising InvalidQueryError if unrecognised."""
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise InvalidQueryError(field, message)


def parse_int(raw: str, field: str, message: str) -> int:
    """Parse a base-10 integer query value.

    Only an optional sign followed by ASCII digits is accepted: no whitespace,
    no underscores and no non-ASCII digits.
    """
    if not _INT_RE.fullmatch(raw):
        raise InvalidQueryError(field, message)
    return int(raw)


def parse_sort(raw: str) -> SortOrder:
    """Map a ``sort_by`` value onto a :class:`SortOrder`."""
    try:
        return SortOrder(raw)
    except ValueError as exc:
        raise InvalidQueryError("sort_by", "Invalid Sort By") from exc


def parse_feed_query(
    viewer: Viewer,
    *,
    sort_by: str = SortOrder.NEWEST.value,
    search_title: str = "",
    category_id: str = "0",
    me: str = "false",
) -> FeedQuery:
    """Build the sort order and filter for a feed request.

    Args:
        viewer: Identity of the caller; needed when ``me`` is true.
        sort_by: One of the :class:`SortOrder` values.
        search_title: Case-insensitive substring to match in titles.
        category_id: Category to restrict to; ``0`` means all categories.
        me: Restrict to posts authored by the caller.

    Returns:
        The parsed query.

    Raises:
        InvalidQueryError: If a parameter is malformed.
        AuthenticationRequiredError: If ``me`` is true and the caller is anonymous.
    """
    sort = parse_sort(sort_by)

    category = parse_int(category_id, "category_id", "Invalid Filter By Category ID")
    only_mine = parse_bool(me, "me", "Invalid Filter By Me")

    author_id: int | None = None
    if only_mine:
        if not viewer.authenticated:
            raise AuthenticationRequiredError("Authentication required to filter by me")
        author_id = viewer.user_id

    return FeedQuery(
        sort=sort,
        filter=FeedFilter(
            search_title=search_title,
            category_id=category or None,
            author_id=author_id,
        ),
    )


def parse_page(limit: str | None = None, offset: str = "0") -> Page:
    """Parse pagination parameters, bounding the limit by configuration."""
    if limit is None:
        limit = str(settings.feed_default_limit)
    size = parse_int(limit, "limit", "Invalid Limit")
    if size < 1 or size > settings.feed_max_limit:
        raise InvalidQueryError("limit", "Invalid Limit")

    start = parse_int(offset, "offset", "Invalid Offset")
    if start < 0:
        raise InvalidQueryError("offset", "Invalid Offset")
    return Page(limit=size, offset=start)
