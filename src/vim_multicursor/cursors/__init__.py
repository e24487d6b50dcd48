"""Cursor model, cursor set, match location, and coordinate rebasing."""

from .cursor_set import MultiCursorSet
from .errors import InvalidPattern, MultiCursorError, NoMatchFound, NoMatches, OutOfBounds
from .locator import MatchLocator, MatchSpan, RegexMatchLocator, literal_pattern, word_at
from .models import Cursor, RegisterValue
from .rebase import Edit, rebase

__all__ = [
    "Cursor",
    "Edit",
    "InvalidPattern",
    "MatchLocator",
    "MatchSpan",
    "MultiCursorError",
    "MultiCursorSet",
    "NoMatchFound",
    "NoMatches",
    "OutOfBounds",
    "RegexMatchLocator",
    "RegisterValue",
    "literal_pattern",
    "rebase",
    "word_at",
]
