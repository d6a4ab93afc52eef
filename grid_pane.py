import curses

from cell_format import render_value


def cell_text(value) -> str:
    # grid cells are single-line; row detail shows the full value
    return render_value(value).replace("\n", " ")


def column_widths(columns, rows_text, max_width):
    """Widths from the header and the visible page only, capped at ``max_width``."""
    widths = []
    for c, name in enumerate(columns):
        max_len = len(str(name))
        for row in rows_text:
            max_len = max(max_len, len(row[c]))
        widths.append(min(max_width, max_len + 2))
    return widths


def count_fitting(widths, col_offset, avail_w):
    count = 0
    used = 0
    for cw in widths[col_offset:]:
        if used + cw + 1 > avail_w:
            break
        used += cw + 1
        count += 1
    return max(1, count)


def adjust_col_offset(widths, col_offset, curr_col, avail_w):
    """Smallest shift of ``col_offset`` that keeps ``curr_col`` on screen."""
    if not widths:
        return 0
    col_offset = max(0, min(col_offset, len(widths) - 1))
    if curr_col < col_offset:
        col_offset = curr_col
    while curr_col >= col_offset + count_fitting(widths, col_offset, avail_w):
        col_offset += 1
    return max(0, col_offset)


def gutter_width(indices) -> int:
    last = max(indices, default=0)
    return max(3, len(str(last)) + 1)


class GridPane:
    """Draws a window of a TableModel; the cursor itself lives in the view state."""

    def __init__(self, max_col_width=40):
        self.max_col_width = max_col_width
        self.col_offset = 0

    def draw(self, win, model, indices, cursor, y0=0):
        """Draw the header at ``y0`` and one line per entry of ``indices`` below it.

        ``indices`` are underlying row indices for the visible page; the highlighted
        line is ``cursor.row - cursor.scroll``.
        """
        h, w = win.getmaxyx()
        columns = model.columns if model is not None else []
        if not columns:
            self._put(win, y0, 0, "(no columns)", w, curses.A_DIM)
            return

        indices = list(indices)
        rows = model.rows_at(indices) if indices else []
        rows_text = [[cell_text(v) for v in row] for row in rows]
        widths = column_widths(columns, rows_text, self.max_col_width)

        row_w = gutter_width(indices)
        avail_w = max(1, w - (row_w + 1))
        self.col_offset = adjust_col_offset(
            widths, self.col_offset, cursor.column, avail_w
        )
        visible_cols = range(
            self.col_offset,
            min(len(columns), self.col_offset + count_fitting(widths, self.col_offset, avail_w)),
        )

        # header
        x = row_w + 1
        for c in visible_cols:
            eff_cw = min(widths[c], max(1, w - x))
            name = str(columns[c])[:eff_cw].rjust(eff_cw)
            self._put(win, y0, x, name, eff_cw, curses.A_BOLD)
            x += eff_cw + 1

        if not indices:
            self._put(win, y0 + 1, 0, "(no rows)", w, curses.A_DIM)
            return

        local_curr = cursor.row - cursor.scroll
        for i, (r, texts) in enumerate(zip(indices, rows_text)):
            y = y0 + 1 + i
            if y >= h:
                break
            self._put(win, y, 0, str(r).rjust(row_w), row_w, curses.A_DIM)
            x = row_w + 1
            for c in visible_cols:
                eff_cw = min(widths[c], max(1, w - x))
                attr = curses.A_NORMAL
                if i == local_curr and c == cursor.column:
                    attr = curses.A_REVERSE
                self._put(win, y, x, texts[c][:eff_cw].rjust(eff_cw), eff_cw, attr)
                x += eff_cw + 1

    @staticmethod
    def _put(win, y, x, text, n, attr=0):
        try:
            win.addnstr(y, x, text, n, attr)
        except curses.error:
            pass
