"""Ex-style command lines evaluated against an editing session."""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional, Tuple

from vim_multicursor.commands import CollapseCursors, FindAll
from vim_multicursor.engine import CommandResult, EditingSession

LineRange = Tuple[int, Optional[int]]
CommandHandler = Callable[[EditingSession, str, LineRange], CommandResult]

_RANGE = re.compile(r"^(?:(?P<all>%)|(?P<first>\d+)(?:,(?P<last>\d+|\$))?)")
_NAME = re.compile(r"^(?P<name>[A-Za-z]+!?)\s*(?P<args>.*)$")


def run_command_line(session: EditingSession, line: str) -> CommandResult:
    """Evaluate ``[range]Name args`` (a leading ``:`` is optional).

    Ranges are 1-based and inclusive like Ex ranges: ``%`` is the whole
    buffer, ``N`` a single line, ``N,M`` or ``N,$`` a span.
    """

    text = line.strip().lstrip(":").strip()
    session.bus.emit("command.submit", text)
    if not text:
        return CommandResult(consumed=True, status="command_empty")

    line_range, rest = _parse_range(text, session.buffer.line_count)
    parsed = _NAME.match(rest)
    if parsed is None:
        return _unknown_command(session, rest)
    name = parsed.group("name")
    handler = _COMMAND_HANDLERS.get(name)
    if handler is None:
        return _unknown_command(session, name)
    return handler(session, parsed.group("args"), line_range)


def _parse_range(text: str, line_count: int) -> Tuple[LineRange, str]:
    found = _RANGE.match(text)
    if found is None or not found.group(0):
        return (0, None), text
    rest = text[found.end() :]
    if found.group("all"):
        return (0, None), rest
    first = max(int(found.group("first")) - 1, 0)
    last_raw = found.group("last")
    if last_raw is None:
        return (first, first), rest
    if last_raw == "$":
        return (first, line_count - 1), rest
    last = max(int(last_raw) - 1, 0)
    if last < first:
        first, last = last, first
    return (first, last), rest


def _unknown_command(session: EditingSession, command: str) -> CommandResult:
    session.bus.emit("command.error", command)
    return CommandResult(consumed=True, status="command_error", message=command)


def _handle_find(
    session: EditingSession, args: str, line_range: LineRange
) -> CommandResult:
    if not args:
        return CommandResult(consumed=True, status="command_error", message="pattern required")
    first, last = line_range
    return session.execute(FindAll(pattern=args, first_line=first, last_line=last))


def _handle_cancel(
    session: EditingSession, args: str, line_range: LineRange
) -> CommandResult:
    del args, line_range
    return session.execute(CollapseCursors())


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "MultipleCursorsFind": _handle_find,
    "MultipleCursorsCancel": _handle_cancel,
}


__all__ = ["run_command_line"]
