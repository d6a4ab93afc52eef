import curses


class OverlayView:
    """Boxed row-detail window laid over the body area."""

    def __init__(self, layout):
        self.layout = layout
        self.win = None

    def _ensure_win(self):
        if self.win is None:
            self.win = curses.newwin(self.layout.body_h, self.layout.W, 1, 0)
            self.win.leaveok(True)
        return self.win

    def close(self):
        self.win = None

    def draw(self, detail):
        if detail is None:
            self.close()
            return

        win = self._ensure_win()
        win.erase()
        h, w = win.getmaxyx()
        try:
            win.box()
        except curses.error:
            pass

        title = f" {detail.snapshot.title} "
        if detail.max_vscroll:
            title += f"[{detail.vscroll + 1}-{min(len(detail.lines), detail.vscroll + detail.height)}/{len(detail.lines)}] "
        try:
            win.addnstr(0, 2, title, max(0, w - 4), curses.A_BOLD)
        except curses.error:
            pass

        for i, line in enumerate(detail.visible_lines()):
            if 1 + i >= h - 1:
                break
            try:
                win.addnstr(1 + i, 1, line, w - 2)
            except curses.error:
                pass

        win.noutrefresh()
