from types import SimpleNamespace

import pandas as pd
import pytest

import events as ev
from navigation import Cursor
from query_runner import QueryFailure, QuerySuccess
from table_model import FrameTableModel
from view_state import (
    Mode,
    Tab,
    ViewState,
    apply_query_result,
    initial_view_state,
    page_rows,
    transition,
)

DOWN = ev.Direction.DOWN
UP = ev.Direction.UP
RIGHT = ev.Direction.RIGHT


class FakeRunner:
    def __init__(self):
        self.submitted = []

    def submit(self, text):
        self.submitted.append(text)
        return len(self.submitted)


def make_app(df=None, history=()):
    if df is None:
        df = pd.DataFrame({"name": ["Alice", "Bob", "Sally"], "age": [31, 40, 27]})
    return SimpleNamespace(
        visualize_model=FrameTableModel(df),
        config={"SEARCH_CHUNK_ROWS": 2, "DETAIL_WRAP": False},
        schema_lines=["a", "b"],
        metadata_lines=["m"] * 30,
        row_groups=[],
        metadata=SimpleNamespace(num_columns=2),
        runner=FakeRunner(),
        history=SimpleNamespace(items=list(history)),
    )


def run(view, app, *events):
    for event in events:
        view = transition(view, event, app)
    return view


def search(view, app, text):
    view = transition(view, ev.StartSearch(), app)
    view = run(view, app, *(ev.EditSearchChar(c) for c in text))
    return transition(view, ev.CommitSearch(), app)


@pytest.fixture
def app():
    return make_app()


@pytest.fixture
def view(app):
    return initial_view_state(app, 24, 80)


# ---------- navigation ----------


def test_initial_filter_is_identity(view):
    assert view.filter.matches == range(3)
    assert not view.filter.active
    assert view.cursor() == Cursor()


def test_cursor_is_clamped_to_row_count(view, app):
    view = run(view, app, *[ev.MoveCursor(DOWN)] * 5)
    assert view.cursor().row == 2
    view = run(view, app, *[ev.MoveCursor(UP)] * 9)
    assert view.cursor().row == 0


def test_column_moves_are_clamped(view, app):
    view = run(view, app, *[ev.MoveColumn(RIGHT)] * 4)
    assert view.cursor().column == 1


def test_page_move_scrolls_with_cursor():
    big = make_app(pd.DataFrame({"n": range(100)}))
    view = initial_view_state(big, 24, 80)
    visible = page_rows(Tab.VISUALIZE, view.viewport)
    view = transition(view, ev.PageMove(DOWN), big)
    assert view.cursor().row == visible
    assert view.cursor().scroll == 1
    view = run(view, big, *[ev.PageMove(DOWN)] * 10)
    assert view.cursor().row == 99
    assert view.cursor().scroll == 100 - visible


def test_tabs_cycle_both_ways(view, app):
    assert transition(view, ev.PrevTab(), app).tab is Tab.SQL
    view = run(view, app, *[ev.NextTab()] * 5)
    assert view.tab is Tab.VISUALIZE


def test_cursors_are_kept_per_tab(view, app):
    view = run(view, app, ev.MoveCursor(DOWN), ev.NextTab(), ev.MoveCursor(DOWN), ev.MoveCursor(DOWN))
    assert view.tab is Tab.SCHEMA
    assert view.cursor().row == 1
    view = run(view, app, *[ev.PrevTab()])
    assert view.cursor().row == 1


def test_resize_refits_scroll():
    big = make_app(pd.DataFrame({"n": range(100)}))
    view = initial_view_state(big, 24, 80)
    view = run(view, big, *[ev.MoveCursor(DOWN)] * 50)
    view = transition(view, ev.Resize(10, 80), big)
    cursor = view.cursor()
    visible = page_rows(Tab.VISUALIZE, view.viewport)
    assert visible == 7
    assert cursor.row == 50
    assert cursor.scroll <= 50 < cursor.scroll + visible


def test_quit_sets_flag_in_any_mode(view, app):
    view = transition(view, ev.StartSearch(), app)
    assert transition(view, ev.Quit(), app).quit


# ---------- search ----------


def test_commit_search_filters_rows(view, app):
    view = search(view, app, "al")
    assert view.mode is Mode.NORMAL
    assert view.filter.query == "al"
    assert list(view.filter.matches) == [0, 2]
    assert view.status == "2 rows match 'al'"
    assert view.cursor().row == 0


def test_status_is_cleared_by_next_event(view, app):
    view = search(view, app, "al")
    view = transition(view, ev.MoveCursor(DOWN), app)
    assert view.status is None


def test_recommitting_same_query_is_idempotent(view, app):
    first = search(view, app, "al")
    second = search(first, app, "")
    # StartSearch seeds the buffer with the committed query
    assert list(second.filter.matches) == list(first.filter.matches)


def test_empty_filter_pins_cursor_and_blocks_detail(view, app):
    view = search(view, app, "zzz")
    assert list(view.filter.matches) == []
    view = run(view, app, ev.MoveCursor(DOWN), ev.PageMove(DOWN))
    assert view.cursor() == Cursor()
    view = transition(view, ev.OpenRowDetail(), app)
    assert view.mode is Mode.NORMAL
    assert view.status == "No rows to show"


def test_cancel_search_input_keeps_committed_filter(view, app):
    view = search(view, app, "al")
    view = run(view, app, ev.StartSearch(), ev.EditSearchChar("x"), ev.CancelOrClear())
    assert view.mode is Mode.NORMAL
    assert view.filter.query == "al"
    assert view.search_buffer == ""


def test_backspace_edits_search_buffer(view, app):
    view = run(view, app, ev.StartSearch(), ev.EditSearchChar("a"), ev.EditSearchChar("b"), ev.Backspace())
    assert view.search_buffer == "a"


def test_escape_clears_active_filter(view, app):
    view = search(view, app, "al")
    view = transition(view, ev.CancelOrClear(), app)
    assert not view.filter.active
    assert view.filter.matches == range(3)


def test_escape_without_filter_resets_cursor(view, app):
    view = run(view, app, ev.MoveCursor(DOWN), ev.MoveColumn(RIGHT), ev.CancelOrClear())
    assert view.cursor() == Cursor()


def test_start_search_only_on_visualize(view, app):
    view = run(view, app, ev.NextTab(), ev.StartSearch())
    assert view.mode is Mode.NORMAL


# ---------- row detail ----------


def test_detail_shows_underlying_row_of_filtered_view(view, app):
    view = search(view, app, "al")
    view = run(view, app, ev.MoveCursor(DOWN), ev.OpenRowDetail())
    assert view.mode is Mode.ROW_DETAIL
    assert view.detail.snapshot.row_index == 2
    assert ("name", "Sally") in view.detail.snapshot.fields
    assert view.detail_origin is Tab.VISUALIZE


def test_detail_closes_back_to_origin(view, app):
    view = run(view, app, ev.OpenRowDetail(), ev.ScrollDetail(DOWN), ev.CancelOrClear())
    assert view.mode is Mode.NORMAL
    assert view.tab is Tab.VISUALIZE
    assert view.detail is None


def test_detail_ignores_navigation_events(view, app):
    view = run(view, app, ev.OpenRowDetail(), ev.NextTab(), ev.MoveCursor(DOWN))
    assert view.mode is Mode.ROW_DETAIL
    assert view.tab is Tab.VISUALIZE
    assert view.cursor().row == 0


def test_detail_from_sql_result(view, app):
    view = run(view, app, ev.PrevTab(), *(ev.EditQueryChar(c) for c in "select 1"), ev.SubmitQuery())
    model = FrameTableModel(pd.DataFrame({"x": [1, 2]}))
    view = apply_query_result(view, QuerySuccess(view.query.in_flight, model, "select 1"))
    view = run(view, app, ev.MoveCursor(DOWN), ev.OpenRowDetail())
    assert view.detail.snapshot.title == "Row 2 (SQL result)"
    view = transition(view, ev.CancelOrClear(), app)
    assert view.tab is Tab.SQL


# ---------- SQL ----------


def sql_view(view, app, text):
    view = transition(view, ev.PrevTab(), app)
    return run(view, app, *(ev.EditQueryChar(c) for c in text))


def test_query_editing(view, app):
    view = sql_view(view, app, "selectx")
    view = transition(view, ev.Backspace(), app)
    assert view.query.text == "select"


def test_submit_hands_query_to_runner(view, app):
    view = sql_view(view, app, "select 1")
    view = transition(view, ev.SubmitQuery(), app)
    assert app.runner.submitted == ["select 1"]
    assert view.query.in_flight == 1


def test_empty_submit_is_rejected(view, app):
    view = sql_view(view, app, "   ")
    view = transition(view, ev.SubmitQuery(), app)
    assert app.runner.submitted == []
    assert view.status == "Empty query"
    assert view.query.in_flight is None


def test_escape_clears_query_text(view, app):
    view = sql_view(view, app, "select")
    view = transition(view, ev.CancelOrClear(), app)
    assert view.query.text == ""


def test_success_installs_result(view, app):
    view = transition(sql_view(view, app, "q"), ev.SubmitQuery(), app)
    model = FrameTableModel(pd.DataFrame({"x": [1]}))
    view = apply_query_result(view, QuerySuccess(1, model, "q"))
    assert view.query.result is model
    assert view.query.in_flight is None
    assert view.status == "Query returned 1 row"


def test_failure_keeps_previous_result(view, app):
    view = transition(sql_view(view, app, "q"), ev.SubmitQuery(), app)
    model = FrameTableModel(pd.DataFrame({"x": [1]}))
    view = apply_query_result(view, QuerySuccess(1, model, "q"))
    view = transition(view, ev.SubmitQuery(), app)
    view = apply_query_result(view, QueryFailure(2, "Parser Error: syntax", "q"))
    assert view.query.result is model
    assert view.query.error == "Parser Error: syntax"
    assert view.query.in_flight is None


def test_superseded_result_is_dropped(view, app):
    view = sql_view(view, app, "q")
    view = run(view, app, ev.SubmitQuery(), ev.SubmitQuery())
    assert view.query.in_flight == 2
    stale = QuerySuccess(1, FrameTableModel(pd.DataFrame({"x": [1]})), "q")
    assert apply_query_result(view, stale) is view


def test_history_recall():
    app = make_app(history=["select a", "select b"])
    view = initial_view_state(app)
    view = transition(view, ev.PrevTab(), app)
    up = ev.RecallQuery(UP)
    down = ev.RecallQuery(DOWN)
    view = transition(view, up, app)
    assert view.query.text == "select b"
    view = run(view, app, up, up)
    assert view.query.text == "select a"
    view = transition(view, down, app)
    assert view.query.text == "select b"
    view = transition(view, down, app)
    assert view.query.text == ""
    assert view.query.history_index is None


def test_sql_keys_do_not_leak_to_other_tabs(view, app):
    view = transition(view, ev.EditQueryChar("x"), app)
    assert view.query.text == ""
    assert isinstance(view, ViewState)
