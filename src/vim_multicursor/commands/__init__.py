"""Editing and cursor-set commands plus the queue that feeds them."""

from .models import (
    DIRECTIONS,
    AddNextOccurrence,
    ChangeSelection,
    CollapseCursors,
    Command,
    CursorSetCommand,
    DeleteBackward,
    DeleteForward,
    DeleteSelection,
    EditCommand,
    EnterInsert,
    EnterVisual,
    ExitInsert,
    ExitVisual,
    FindAll,
    InsertText,
    Move,
    Newline,
    OpenLine,
    Put,
    Redo,
    RemoveLastCursor,
    SkipOccurrence,
    Undo,
    YankSelection,
)
from .queue import CommandQueue

__all__ = [
    "AddNextOccurrence",
    "ChangeSelection",
    "CollapseCursors",
    "Command",
    "CommandQueue",
    "CursorSetCommand",
    "DIRECTIONS",
    "DeleteBackward",
    "DeleteForward",
    "DeleteSelection",
    "EditCommand",
    "EnterInsert",
    "EnterVisual",
    "ExitInsert",
    "ExitVisual",
    "FindAll",
    "InsertText",
    "Move",
    "Newline",
    "OpenLine",
    "Put",
    "Redo",
    "RemoveLastCursor",
    "SkipOccurrence",
    "Undo",
    "YankSelection",
]
