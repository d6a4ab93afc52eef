"""Interactive view state and the transition function that drives it.

Every input event is folded into a new ``ViewState`` by ``transition``; query
outcomes arriving from the background runner are folded in by
``apply_query_result``. Neither mutates its input, so the event loop holds exactly
one current state and swaps it after each step.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

import events as ev
import search_engine
from navigation import Cursor, fit_cursor, move_column, move_row, page_row
from query_runner import QueryFailure, QuerySuccess
from row_detail import RowDetailSnapshot, RowDetailView
from screen_layout import body_height, detail_size


class Tab(Enum):
    VISUALIZE = "Visualize"
    SCHEMA = "Schema"
    METADATA = "Metadata"
    ROW_GROUPS = "Row Groups"
    SQL = "SQL"


TAB_ORDER = tuple(Tab)


class Mode(Enum):
    NORMAL = "normal"
    SEARCH_INPUT = "search"
    ROW_DETAIL = "detail"


# body rows taken by headers and inputs rather than data rows
TAB_CHROME = {
    Tab.VISUALIZE: 1,
    Tab.SCHEMA: 1,
    Tab.METADATA: 0,
    Tab.ROW_GROUPS: 2,
    Tab.SQL: 3,
}


@dataclass(frozen=True)
class Viewport:
    height: int = 24
    width: int = 80


def page_rows(tab: Tab, viewport: Viewport) -> int:
    return max(1, body_height(viewport.height) - TAB_CHROME[tab])


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    matches: Sequence[int] = range(0)

    @property
    def active(self) -> bool:
        return bool(self.query)


@dataclass(frozen=True)
class QueryState:
    text: str = ""
    result: Any = None
    error: Optional[str] = None
    in_flight: Optional[int] = None
    history_index: Optional[int] = None


@dataclass(frozen=True)
class ViewState:
    tab: Tab = Tab.VISUALIZE
    mode: Mode = Mode.NORMAL
    cursors: Mapping[Tab, Cursor] = field(default_factory=dict)
    search_buffer: str = ""
    filter: FilterState = FilterState()
    query: QueryState = QueryState()
    detail: Optional[RowDetailView] = None
    detail_origin: Optional[Tab] = None
    viewport: Viewport = Viewport()
    status: Optional[str] = None
    quit: bool = False

    def cursor(self, tab: Optional[Tab] = None) -> Cursor:
        return self.cursors.get(tab or self.tab, Cursor())


def initial_view_state(app, height: int = 24, width: int = 80) -> ViewState:
    return ViewState(
        filter=FilterState("", range(app.visualize_model.row_count())),
        viewport=Viewport(height, width),
    )


def extent(view: ViewState, app, tab: Tab) -> tuple[int, int]:
    """(rows, columns) the cursor of ``tab`` may range over."""
    if tab is Tab.VISUALIZE:
        return len(view.filter.matches), app.visualize_model.column_count()
    if tab is Tab.SQL:
        result = view.query.result
        if result is None:
            return 0, 0
        return result.row_count(), result.column_count()
    if tab is Tab.SCHEMA:
        return len(app.schema_lines), 1
    if tab is Tab.METADATA:
        return len(app.metadata_lines), 1
    # row groups: row 0 is the group overview, then one row per column chunk
    if not app.row_groups:
        return 0, 0
    return app.metadata.num_columns + 1, len(app.row_groups)


def _with_cursor(view: ViewState, tab: Tab, cursor: Cursor) -> ViewState:
    cursors = dict(view.cursors)
    cursors[tab] = cursor
    return replace(view, cursors=cursors)


def _refit(view: ViewState, app, tab: Tab, cursor: Cursor) -> ViewState:
    rows, cols = extent(view, app, tab)
    return _with_cursor(
        view, tab, fit_cursor(cursor, rows, cols, page_rows(tab, view.viewport))
    )


# ---------------- transition ----------------


def transition(view: ViewState, event, app) -> ViewState:
    if isinstance(event, ev.Quit):
        return replace(view, quit=True)
    if isinstance(event, ev.Resize):
        return _resize(view, event, app)

    if view.status is not None:
        view = replace(view, status=None)

    if view.mode is Mode.ROW_DETAIL:
        return _detail_transition(view, event)
    if view.mode is Mode.SEARCH_INPUT:
        return _search_transition(view, event, app)
    return _normal_transition(view, event, app)


def _resize(view: ViewState, event: ev.Resize, app) -> ViewState:
    view = replace(view, viewport=Viewport(event.height, event.width))
    for tab in list(view.cursors):
        view = _refit(view, app, tab, view.cursors[tab])
    if view.detail is not None:
        h, w = detail_size(event.height, event.width)
        view = replace(view, detail=view.detail.resize(h, w))
    return view


def _detail_transition(view: ViewState, event) -> ViewState:
    if isinstance(event, ev.CancelOrClear):
        return replace(
            view,
            mode=Mode.NORMAL,
            tab=view.detail_origin or view.tab,
            detail=None,
            detail_origin=None,
        )
    if isinstance(event, ev.ScrollDetail):
        d = event.direction
        return replace(view, detail=view.detail.scroll(d.dy, d.dx))
    if isinstance(event, ev.PageScrollDetail):
        d = event.direction
        return replace(view, detail=view.detail.page(d.dy, d.dx))
    return view


def _search_transition(view: ViewState, event, app) -> ViewState:
    if isinstance(event, ev.EditSearchChar):
        return replace(view, search_buffer=view.search_buffer + event.char)
    if isinstance(event, ev.Backspace):
        return replace(view, search_buffer=view.search_buffer[:-1])
    if isinstance(event, ev.CancelOrClear):
        # drop the edit only; the committed filter stays in place
        return replace(view, mode=Mode.NORMAL, search_buffer="")
    if isinstance(event, ev.CommitSearch):
        return _commit_search(view, app)
    return view


def _commit_search(view: ViewState, app) -> ViewState:
    query = view.search_buffer
    matches = search_engine.apply(
        app.visualize_model, query, app.config["SEARCH_CHUNK_ROWS"]
    )
    status = None
    if query:
        status = f"{len(matches)} rows match '{query}'"
        skipped = getattr(matches, "skipped_rows", 0)
        if skipped:
            status += f" ({skipped} rows unreadable)"
    view = replace(
        view,
        mode=Mode.NORMAL,
        search_buffer="",
        filter=FilterState(query, matches),
        status=status,
    )
    old = view.cursor(Tab.VISUALIZE)
    return _refit(view, app, Tab.VISUALIZE, Cursor(column=old.column))


def _normal_transition(view: ViewState, event, app) -> ViewState:
    tab = view.tab

    if isinstance(event, (ev.NextTab, ev.PrevTab)):
        step = 1 if isinstance(event, ev.NextTab) else -1
        idx = (TAB_ORDER.index(tab) + step) % len(TAB_ORDER)
        return replace(view, tab=TAB_ORDER[idx])

    if isinstance(event, ev.StartSearch):
        if tab is not Tab.VISUALIZE:
            return view
        return replace(view, mode=Mode.SEARCH_INPUT, search_buffer=view.filter.query)

    if isinstance(event, ev.CancelOrClear):
        return _cancel_normal(view, app)

    if isinstance(event, (ev.MoveCursor, ev.PageMove, ev.MoveColumn)):
        return _move(view, event, app)

    if isinstance(event, ev.OpenRowDetail):
        return _open_detail(view, app)

    if tab is Tab.SQL:
        return _sql_transition(view, event, app)
    return view


def _cancel_normal(view: ViewState, app) -> ViewState:
    tab = view.tab
    cursor = view.cursor()
    if tab is Tab.VISUALIZE and view.filter.active:
        view = replace(
            view,
            filter=FilterState("", range(app.visualize_model.row_count())),
        )
        return _refit(view, app, tab, Cursor(column=cursor.column))
    if tab is Tab.SQL and view.query.text:
        return replace(view, query=replace(view.query, text="", history_index=None))
    return _with_cursor(view, tab, Cursor())


def _move(view: ViewState, event, app) -> ViewState:
    tab = view.tab
    rows, cols = extent(view, app, tab)
    visible = page_rows(tab, view.viewport)
    cursor = view.cursor()
    d = event.direction
    if isinstance(event, ev.MoveColumn):
        if not d.dx:
            return view
        return _with_cursor(view, tab, move_column(cursor, d.dx, cols))
    if not d.dy:
        return view
    if isinstance(event, ev.PageMove):
        return _with_cursor(view, tab, page_row(cursor, d.dy, rows, visible))
    return _with_cursor(view, tab, move_row(cursor, d.dy, rows, visible))


def _open_detail(view: ViewState, app) -> ViewState:
    tab = view.tab
    cursor = view.cursor()
    if tab is Tab.VISUALIZE:
        matches = view.filter.matches
        if not matches:
            return replace(view, status="No rows to show")
        model = app.visualize_model
        row_index = matches[min(cursor.row, len(matches) - 1)]
        label = "Visualize"
    elif tab is Tab.SQL:
        model = view.query.result
        if model is None or model.row_count() == 0:
            return replace(view, status="No result rows to show")
        row_index = min(cursor.row, model.row_count() - 1)
        label = "SQL result"
    else:
        return view

    snapshot = RowDetailSnapshot.capture(
        model.columns, model.row(row_index), row_index, label
    )
    h, w = detail_size(view.viewport.height, view.viewport.width)
    detail = RowDetailView.open(snapshot, h, w, wrap=app.config["DETAIL_WRAP"])
    return replace(view, mode=Mode.ROW_DETAIL, detail=detail, detail_origin=tab)


def _sql_transition(view: ViewState, event, app) -> ViewState:
    q = view.query
    if isinstance(event, ev.EditQueryChar):
        return replace(view, query=replace(q, text=q.text + event.char, history_index=None))
    if isinstance(event, ev.Backspace):
        return replace(view, query=replace(q, text=q.text[:-1], history_index=None))
    if isinstance(event, ev.SubmitQuery):
        if not q.text.strip():
            return replace(view, status="Empty query")
        token = app.runner.submit(q.text)
        return replace(view, query=replace(q, in_flight=token, history_index=None))
    if isinstance(event, ev.RecallQuery):
        return _recall(view, event, app)
    return view


def _recall(view: ViewState, event: ev.RecallQuery, app) -> ViewState:
    q = view.query
    items = app.history.items
    if not items:
        return view
    if event.direction is ev.Direction.UP:
        idx = len(items) - 1 if q.history_index is None else max(0, q.history_index - 1)
        return replace(view, query=replace(q, text=items[idx], history_index=idx))
    if q.history_index is None:
        return view
    idx = q.history_index + 1
    if idx >= len(items):
        return replace(view, query=replace(q, text="", history_index=None))
    return replace(view, query=replace(q, text=items[idx], history_index=idx))


# ---------------- query results ----------------


def apply_query_result(view: ViewState, result) -> ViewState:
    """Fold a runner result in; results of superseded submissions are dropped."""
    q = view.query
    if q.in_flight is None or result.token != q.in_flight:
        return view
    if isinstance(result, QuerySuccess):
        n = result.model.row_count()
        view = replace(
            view,
            query=replace(q, result=result.model, error=None, in_flight=None),
            status=f"Query returned {n} row{'s' if n != 1 else ''}",
        )
        return _with_cursor(view, Tab.SQL, Cursor())
    if isinstance(result, QueryFailure):
        return replace(view, query=replace(q, error=result.message, in_flight=None))
    return view
