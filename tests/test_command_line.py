from __future__ import annotations

from typing import List

from vim_multicursor.actions import run_command_line
from vim_multicursor.commands import ChangeSelection, ExitInsert, InsertText
from vim_multicursor.engine import EditingSession
from vim_multicursor.runtime import EngineSettings


def make_session(*lines: str) -> EditingSession:
    return EditingSession.from_lines(lines, settings=EngineSettings())


def test_find_command_then_change() -> None:
    session = make_session("hello", "hello")

    result = run_command_line(session, ":MultipleCursorsFind hello")
    session.feed([ChangeSelection(), InsertText("world"), ExitInsert()])

    assert result.status == "cursors_found"
    assert session.lines() == ("world", "world")


def test_find_command_respects_line_ranges() -> None:
    lines = ("a", "a", "a", "a")

    session = make_session(*lines)
    run_command_line(session, "2,3MultipleCursorsFind a")
    assert session.cursor_positions() == ((1, 0), (2, 0))

    session = make_session(*lines)
    run_command_line(session, "%MultipleCursorsFind a")
    assert len(session.cursor_positions()) == 4

    session = make_session(*lines)
    run_command_line(session, "2,$MultipleCursorsFind a")
    assert session.cursor_positions() == ((1, 0), (2, 0), (3, 0))

    session = make_session(*lines)
    run_command_line(session, "4MultipleCursorsFind a")
    assert session.cursor_positions() == ((3, 0),)


def test_find_command_requires_a_pattern() -> None:
    session = make_session("hello")

    result = run_command_line(session, "MultipleCursorsFind")

    assert result.status == "command_error"
    assert not session.multi


def test_find_command_without_matches() -> None:
    session = make_session("hello")

    assert run_command_line(session, "MultipleCursorsFind nope").status == "not_found"


def test_unknown_command_emits_error_event() -> None:
    session = make_session("hello")
    errors: List[object] = []
    session.bus.subscribe("command.error", errors.append)

    result = run_command_line(session, ":Bogus args")

    assert result.status == "command_error"
    assert result.message == "Bogus"
    assert errors == ["Bogus"]


def test_cancel_command_collapses_the_set() -> None:
    session = make_session("hello", "hello")
    run_command_line(session, "MultipleCursorsFind hello")

    result = run_command_line(session, "MultipleCursorsCancel")

    assert result.status == "collapsed"
    assert not session.multi


def test_empty_command_line() -> None:
    session = make_session("hello")

    assert run_command_line(session, ":").status == "command_empty"
