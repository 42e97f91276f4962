# src/discusspedia/utils/grouping.py
"""Grouping helpers for folding flattened one-to-many join results."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

RowT = TypeVar("RowT")
KeyT = TypeVar("KeyT", bound=Hashable)


@dataclass
class Group(Generic[KeyT, RowT]):
    """All rows sharing one key, in arrival order."""

    key: KeyT
    rows: list[RowT] = field(default_factory=list)

    @property
    def first(self) -> RowT:
        """The row that introduced this key."""
        return self.rows[0]


def group_by_key(rows: Iterable[RowT], key: Callable[[RowT], KeyT]) -> list[Group[KeyT, RowT]]:
    """Group rows by ``key`` preserving the order in which keys first appear.

    Unlike ``itertools.groupby`` the input need not be sorted: a key that shows
    up again later is appended to its existing group rather than starting a new one.
    """
    groups: dict[KeyT, Group[KeyT, RowT]] = {}
    for row in rows:
        row_key = key(row)
        group = groups.get(row_key)
        if group is None:
            group = groups[row_key] = Group(key=row_key)
        group.rows.append(row)
    # dicts keep insertion order, which is first-seen order here.
    return list(groups.values())
