from __future__ import annotations

from typing import List, Tuple

from vim_multicursor.commands import (
    AddNextOccurrence,
    ChangeSelection,
    DeleteBackward,
    DeleteSelection,
    EnterInsert,
    EnterVisual,
    ExitInsert,
    ExitVisual,
    InsertText,
    Move,
    Newline,
    OpenLine,
    RemoveLastCursor,
    SkipOccurrence,
)
from vim_multicursor.engine import EditingSession, SessionBus
from vim_multicursor.runtime import EngineSettings


def make_session(*lines: str, **settings: bool) -> EditingSession:
    return EditingSession.from_lines(lines, settings=EngineSettings(**settings))


def select_next(session: EditingSession, times: int) -> None:
    for _ in range(times):
        assert session.add_next().status == "cursor_added"


def change_to(session: EditingSession, text: str) -> None:
    session.feed([ChangeSelection(), InsertText(text), ExitInsert()])


def test_multiline_replacement() -> None:
    session = make_session("hello", "hello", "hello")

    select_next(session, 3)
    change_to(session, "world")

    assert session.lines() == ("world", "world", "world")
    assert session.mode == "normal"


def test_single_line_replacement() -> None:
    session = make_session("hello hello hello")

    select_next(session, 3)
    change_to(session, "world")

    assert session.lines() == ("world world world",)


def test_mixed_line_replacement() -> None:
    session = make_session("hello hello", "hello")

    select_next(session, 3)
    change_to(session, "world")

    assert session.lines() == ("world world", "world")


def test_new_line_in_insert_mode() -> None:
    session = make_session("hello", "hello")

    select_next(session, 2)
    session.feed(
        [
            ChangeSelection(),
            InsertText("hello"),
            Newline(),
            InsertText("world"),
            ExitInsert(),
        ]
    )

    assert session.lines() == ("hello", "world", "hello", "world")


def test_typed_text_with_embedded_line_break() -> None:
    session = make_session("hello", "hello")

    select_next(session, 2)
    change_to(session, "hello\nworld")

    assert session.lines() == ("hello", "world", "hello", "world")


def test_open_line_below_after_leaving_visual() -> None:
    session = make_session("hello", "hello")

    select_next(session, 2)
    session.feed([ExitVisual(), OpenLine(), InsertText("world"), ExitInsert()])

    assert session.lines() == ("hello", "world", "hello", "world")


def test_open_line_above_after_leaving_visual() -> None:
    session = make_session("hello", "hello")

    select_next(session, 2)
    session.feed(
        [ExitVisual(), OpenLine(above=True), InsertText("world"), ExitInsert()]
    )

    assert session.lines() == ("world", "hello", "world", "hello")


def test_find_all_then_change() -> None:
    session = make_session("hello", "hello")

    result = session.add_all("hello")

    assert result.status == "cursors_found"
    assert session.cursor_positions() == ((0, 0), (1, 0))
    assert session.mode == "visual"

    change_to(session, "world")
    assert session.lines() == ("world", "world")


def test_visual_line_change() -> None:
    session = make_session("hello world", "hello world")

    select_next(session, 2)
    session.execute(EnterVisual(linewise=True))
    assert session.mode == "visual_line"
    change_to(session, "hi!")

    assert session.lines() == ("hi!", "hi!")


def test_only_selected_occurrences_are_replaced() -> None:
    session = make_session("foo bar foo", "baz foo", "food")

    session.add_all(r"\bfoo\b")
    change_to(session, "qux")

    assert session.lines() == ("qux bar qux", "baz qux", "food")


def test_change_of_touching_occurrences_replaces_each_one() -> None:
    session = make_session("hellohello")
    session.add_all("hello")
    assert session.cursor_positions() == ((0, 0), (0, 5))

    change_to(session, "world")

    assert session.lines() == ("worldworld",)
    assert session.cursor_positions() == ((0, 4), (0, 9))


def test_change_of_single_character_neighbours() -> None:
    session = make_session("aaa")
    session.add_all("a")

    change_to(session, "b")

    assert session.lines() == ("bbb",)
    assert len(session.cursor_positions()) == 3


def test_delete_of_touching_occurrences_merges_afterwards() -> None:
    session = make_session("xyxy")
    session.add_all("xy")

    result = session.execute(DeleteSelection())

    assert result.status == "ok"
    assert session.lines() == ("",)
    assert session.cursor_positions() == ((0, 0),)
    assert session.mode == "normal"


def test_undo_and_redo_keep_coincident_insertion_points() -> None:
    session = make_session("hellohello")
    session.add_all("hello")
    session.execute(ChangeSelection())
    assert session.cursor_positions() == ((0, 0), (0, 0))

    session.undo()
    assert session.lines() == ("hellohello",)

    session.redo()
    assert session.lines() == ("",)
    assert session.cursor_positions() == ((0, 0), (0, 0))


def test_add_next_with_pattern_searches_from_the_cursor() -> None:
    session = make_session("hello x hello")
    session.move_cursor(0, 3)

    assert session.add_next("hello").status == "cursor_added"
    assert session.cursor_positions() == ((0, 8),)

    session = make_session("hello x hello")
    assert session.add_next("hello").status == "cursor_added"
    assert session.cursor_positions() == ((0, 0),)


def test_add_next_reports_not_found_when_every_occurrence_is_taken() -> None:
    session = make_session("hello", "hello")
    select_next(session, 2)

    result = session.add_next()

    assert result.status == "not_found"
    assert session.cursor_positions() == ((0, 0), (1, 0))


def test_add_next_with_unknown_pattern_changes_nothing() -> None:
    session = make_session("hello world")

    result = session.add_next("zzz")

    assert result.status == "not_found"
    assert result.message == "zzz"
    assert not session.multi
    assert session.mode == "normal"


def test_add_next_without_word_under_cursor() -> None:
    session = make_session("a  b")
    session.move_cursor(0, 1)

    assert session.execute(AddNextOccurrence()).status == "not_found"


def test_whole_word_seed_setting() -> None:
    strict = make_session("hello helloworld")
    select_next(strict, 1)
    assert strict.add_next().status == "not_found"

    loose = make_session("hello helloworld", whole_word=False)
    select_next(loose, 2)
    assert loose.cursor_positions() == ((0, 0), (0, 6))


def test_visual_selection_seeds_the_pattern() -> None:
    session = make_session("foo.bar foo.bar")

    session.feed([EnterVisual(), Move("right", count=6)])
    select_next(session, 2)
    change_to(session, "x")

    assert session.lines() == ("x x",)


def test_edits_without_cursor_set_use_the_ordinary_cursor() -> None:
    session = make_session("abc")
    session.move_cursor(0, 1)

    results = session.feed([EnterInsert(), InsertText("X")])

    assert [result.status for result in results] == ["ok", "ok"]
    assert session.text == "aXbc"
    assert session.cursor_positions() == ((0, 2),)
    assert not session.multi


def test_collapse_returns_to_a_single_cursor_at_the_primary() -> None:
    session = make_session("hello", "hello")
    session.add_all("hello")

    result = session.collapse()

    assert result.status == "collapsed"
    assert not session.multi
    assert session.cursor_positions() == ((1, 0),)
    assert session.mode == "normal"
    assert session.collapse().status == "single_cursor"


def test_skip_and_remove_last() -> None:
    session = make_session("hello", "hello", "hello")
    select_next(session, 2)

    assert session.execute(SkipOccurrence()).status == "cursor_skipped"
    assert session.cursor_positions() == ((0, 0), (2, 0))

    assert session.execute(RemoveLastCursor()).status == "cursor_removed"
    assert session.cursor_positions() == ((0, 0),)
    assert session.multi

    assert session.execute(RemoveLastCursor()).status == "cursor_removed"
    assert not session.multi
    assert session.mode == "normal"
    assert session.execute(RemoveLastCursor()).status == "empty_set"


def test_invalid_pattern_is_reported_as_a_result() -> None:
    session = make_session("abc")

    result = session.add_all("(")

    assert result.status == "invalid_pattern"
    assert not session.multi


def test_undo_and_redo_step_one_replicated_command_at_a_time() -> None:
    session = make_session("hello", "hello")
    select_next(session, 2)
    session.feed([ChangeSelection(), InsertText("x")])

    assert session.undo().status == "undo"
    assert session.lines() == ("", "")
    assert session.cursor_positions() == ((0, 0), (1, 0))
    assert session.mode == "normal"

    session.undo()
    assert session.lines() == ("hello", "hello")
    assert session.undo().status == "nothing_to_undo"

    assert session.redo().status == "redo"
    assert session.redo().status == "redo"
    assert session.lines() == ("x", "x")
    assert session.cursor_positions() == ((0, 1), (1, 1))
    assert session.redo().status == "nothing_to_redo"


def test_commands_without_text_changes_leave_no_history() -> None:
    session = make_session("hello")

    session.feed([EnterVisual(), ExitVisual(), Move("right")])

    assert session.history() == ()


def test_partial_result_when_one_cursor_cannot_apply() -> None:
    session = make_session("ab", "ab")
    session.add_all("a")
    session.execute(ExitVisual())

    result = session.execute(DeleteBackward())

    assert result.status == "partial"
    assert result.skipped == ((0, 0),)
    assert session.lines() == ("abab",)
    assert session.cursor_positions() == ((0, 0), (0, 2))


def test_events_follow_mode_and_cursor_changes() -> None:
    bus = SessionBus()
    seen: List[Tuple[str, object]] = []
    for name in ("mode.switch", "cursors.added", "replicate.done"):
        bus.subscribe(name, lambda payload, name=name: seen.append((name, payload)))
    session = EditingSession.from_text("hello", bus=bus, settings=EngineSettings())

    session.add_next()
    session.execute(ChangeSelection())

    names = [name for name, _ in seen]
    assert names[:2] == ["mode.switch", "cursors.added"]
    assert ("mode.switch", {"mode": "insert", "previous": "visual"}) in seen
    assert "replicate.done" in names


def test_snapshot_reports_primary_and_selections() -> None:
    session = make_session("hello", "hello")
    session.add_all("hello")

    view = session.snapshot()

    assert view.cursors == ((0, 0), (1, 0))
    assert view.primary == 1
    assert view.mode == "visual"
    assert view.selections == ((0, 4), (1, 4))
    assert view.text == "hello\nhello"


def test_queued_commands_run_in_order() -> None:
    session = make_session("abc")
    session.submit(EnterInsert())
    session.submit(InsertText("1"))
    session.submit(InsertText("2"))

    results = session.drain()

    assert len(results) == 3
    assert session.text == "12abc"
    assert len(session.queue) == 0
