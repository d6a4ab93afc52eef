import curses
import logging

from grid_pane import GridPane
from info_panes import (
    row_group_header,
    row_group_lines,
    row_group_selector,
    schema_header,
)
from input_dispatcher import translate
from overlay import OverlayView
from pagination import page_bounds
from query_runner import QuerySuccess
from screen_layout import ScreenLayout
from status_bar import render_status
from view_state import (
    TAB_ORDER,
    Mode,
    Tab,
    apply_query_result,
    initial_view_state,
    page_rows,
    transition,
)

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, stdscr, app_state):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)
        self.stdscr.keypad(True)

        self.app = app_state
        self.layout = ScreenLayout(stdscr)
        self.view = initial_view_state(app_state, self.layout.H, self.layout.W)

        max_w = app_state.config["MAX_COL_WIDTH"]
        self.grids = {
            Tab.VISUALIZE: GridPane(max_w),
            Tab.SQL: GridPane(max_w),
        }
        self.overlay = OverlayView(self.layout)

    # ---------------- UI ----------------

    def redraw(self):
        view = self.view
        self._draw_tab_bar()

        win = self.layout.body_win
        win.erase()
        if view.mode is Mode.ROW_DETAIL:
            # detail keeps the origin tab's body underneath, the overlay covers it
            win.noutrefresh()
        else:
            self.overlay.close()
            drawer = {
                Tab.VISUALIZE: self._draw_visualize,
                Tab.SCHEMA: self._draw_schema,
                Tab.METADATA: self._draw_metadata,
                Tab.ROW_GROUPS: self._draw_row_groups,
                Tab.SQL: self._draw_sql,
            }[view.tab]
            drawer(win)
            win.noutrefresh()

        self._draw_status()
        if view.mode is Mode.ROW_DETAIL:
            self.overlay.draw(view.detail)
        curses.doupdate()

    def _draw_tab_bar(self):
        tw = self.layout.tab_win
        tw.erase()
        x = 0
        _, w = tw.getmaxyx()
        for tab in TAB_ORDER:
            label = f" {tab.value} "
            attr = curses.A_REVERSE if tab is self.view.tab else curses.A_NORMAL
            if x >= w - 1:
                break
            try:
                tw.addnstr(0, x, label, w - x - 1, attr)
            except curses.error:
                pass
            x += len(label) + 1
        tw.noutrefresh()

    def _draw_status(self):
        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        view = self.view
        context = {
            "tab": view.tab.value,
            "mode": view.mode.value,
            "status_msg": view.status,
            "search_buffer": view.search_buffer,
            "filter_query": view.filter.query,
            "filter_count": len(view.filter.matches),
            "total_rows": self.app.visualize_model.row_count(),
            "query_running": view.query.in_flight is not None,
            "file_path": self.app.file_path,
        }
        try:
            sw.addnstr(0, 0, render_status(context, w), max(0, w - 1))
        except curses.error:
            pass
        sw.noutrefresh()

    def _draw_lines(self, win, y0, lines, tab):
        h, w = win.getmaxyx()
        cursor = self.view.cursor(tab)
        start, end = page_bounds(
            cursor.scroll, page_rows(tab, self.view.viewport), len(lines)
        )
        for i, line in enumerate(lines[start:end]):
            y = y0 + i
            if y >= h:
                break
            attr = curses.A_REVERSE if start + i == cursor.row else curses.A_NORMAL
            try:
                win.addnstr(y, 0, line, max(0, w - 1), attr)
            except curses.error:
                pass

    def _draw_visualize(self, win):
        view = self.view
        cursor = view.cursor(Tab.VISUALIZE)
        matches = view.filter.matches
        start, end = page_bounds(
            cursor.scroll, page_rows(Tab.VISUALIZE, view.viewport), len(matches)
        )
        self.grids[Tab.VISUALIZE].draw(
            win, self.app.visualize_model, matches[start:end], cursor
        )

    def _draw_schema(self, win):
        try:
            win.addnstr(0, 0, schema_header(self.app.schema), self.layout.W - 1, curses.A_BOLD)
        except curses.error:
            pass
        self._draw_lines(win, 1, self.app.schema_lines, Tab.SCHEMA)

    def _draw_metadata(self, win):
        self._draw_lines(win, 0, self.app.metadata_lines, Tab.METADATA)

    def _draw_row_groups(self, win):
        groups = self.app.row_groups
        cursor = self.view.cursor(Tab.ROW_GROUPS)
        selected = min(cursor.column, max(0, len(groups) - 1))
        try:
            win.addnstr(0, 0, row_group_selector(groups, selected, self.layout.W), self.layout.W - 1)
            if groups:
                win.addnstr(1, 0, row_group_header(), self.layout.W - 1, curses.A_BOLD)
        except curses.error:
            pass
        self._draw_lines(win, 2, row_group_lines(groups, selected), Tab.ROW_GROUPS)

    def _draw_sql(self, win):
        view = self.view
        q = view.query
        w = self.layout.W
        try:
            win.addnstr(0, 0, f"SQL> {q.text}", w - 1, curses.A_BOLD)
            if q.error:
                win.addnstr(1, 0, f"Error: {q.error}".split("\n", 1)[0], w - 1)
            elif q.in_flight is not None:
                win.addnstr(1, 0, "Running…", w - 1, curses.A_DIM)
            elif q.result is not None:
                win.addnstr(
                    1,
                    0,
                    f"{q.result.row_count()} rows x {q.result.column_count()} columns",
                    w - 1,
                    curses.A_DIM,
                )
            else:
                win.addnstr(
                    1,
                    0,
                    f"Query the file as table \"{self.app.config['SQL_TABLE_NAME']}\"",
                    w - 1,
                    curses.A_DIM,
                )
        except curses.error:
            pass

        if q.result is None:
            return
        cursor = view.cursor(Tab.SQL)
        start, end = page_bounds(
            cursor.scroll, page_rows(Tab.SQL, view.viewport), q.result.row_count()
        )
        self.grids[Tab.SQL].draw(win, q.result, range(start, end), cursor, y0=2)

    # ---------------- events ----------------

    def _drain_results(self):
        for result in self.app.runner.poll():
            before = self.view
            self.view = apply_query_result(before, result)
            accepted = self.view is not before
            if accepted and isinstance(result, QuerySuccess):
                self.app.history.record(result.text)

    def _handle_key(self, ch):
        if ch == curses.KEY_RESIZE:
            curses.update_lines_cols()
            self.layout = ScreenLayout(self.stdscr)
            self.overlay = OverlayView(self.layout)
            event = translate(ch, self.view, (self.layout.H, self.layout.W))
        else:
            event = translate(ch, self.view)
        if event is None:
            return
        self.view = transition(self.view, event, self.app)

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        logger.info("opened %s", self.app.file_path)

        while not self.view.quit:
            self.redraw()
            ch = self.stdscr.getch()
            self._drain_results()
            if ch == -1:
                continue
            self._handle_key(ch)
