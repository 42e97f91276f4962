# tests/test_ownership.py
"""Tests for the shared ownership check."""

import pytest

from discusspedia.core.errors import ForbiddenError, NotFoundError
from discusspedia.services.ownership import ensure_owner


class FakeStore:
    def __init__(self, authors: dict[int, int]) -> None:
        self.authors = authors

    def author_of(self, resource_id: int) -> int | None:
        return self.authors.get(resource_id)


def test_owner_passes():
    ensure_owner(FakeStore({1: 10}), 1, 10)


def test_missing_resource():
    with pytest.raises(NotFoundError) as exc_info:
        ensure_owner(FakeStore({}), 1, 10, resource="Questionnaire")
    assert str(exc_info.value) == "Questionnaire Not Found"


def test_other_author():
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_owner(FakeStore({1: 11}), 1, 10)
    assert str(exc_info.value) == "You are not the owner of this post"
