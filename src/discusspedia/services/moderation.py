"""Content-moderation gate for user-written text."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from enum import Enum
from typing import Protocol

from discusspedia.core.errors import ContentRejectedError
from discusspedia.core.settings import settings

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\w+", re.UNICODE)

REJECTED_MESSAGE = "Your post contains bad words"


class Verdict(str, Enum):
    """Outcome of classifying a piece of text."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ModerationGate(Protocol):
    """Anything that can classify free text before it is written."""

    def classify(self, text: str) -> Verdict: ...


class WordListModerationGate:
    """Reject text containing any banned word as a whole token."""

    def __init__(self, banned_words: Iterable[str]) -> None:
        self.banned_words = frozenset(word.casefold() for word in banned_words if word)

    def classify(self, text: str) -> Verdict:
        """Classify text as accepted or rejected.

        Args:
            text: Title, description or other user-written text.

        Returns:
            ``Verdict.REJECTED`` if a banned word appears, else ``Verdict.ACCEPTED``.
        """
        for token in _WORD_RE.findall((text or "").casefold()):
            if token in self.banned_words:
                return Verdict.REJECTED
        return Verdict.ACCEPTED


def ensure_acceptable(gate: ModerationGate, *texts: str) -> None:
    """Raise ContentRejectedError if the gate rejects any of ``texts``."""
    for text in texts:
        if gate.classify(text) is Verdict.REJECTED:
            logger.info("Moderation gate rejected submitted text")
            raise ContentRejectedError(REJECTED_MESSAGE)


_default_gate = WordListModerationGate(settings.banned_words)


def get_moderation_gate() -> ModerationGate:
    """Return the configured moderation gate (overridable as a dependency)."""
    return _default_gate
