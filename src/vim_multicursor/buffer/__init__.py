"""Line buffer, edit primitives, and undo history."""

from .buffer import Buffer, BufferView, Transaction
from .document import BufferDocument
from .state import Position, Span, end_of_text, ordered, step_back, step_forward
from .undo import UndoEntry, UndoTimeline
from .validation import BufferValidationError, ensure_line, ensure_position

__all__ = [
    "Buffer",
    "BufferDocument",
    "BufferValidationError",
    "BufferView",
    "Position",
    "Span",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "end_of_text",
    "ensure_line",
    "ensure_position",
    "ordered",
    "step_back",
    "step_forward",
]
