import curses

TAB_BAR_H = 1
STATUS_H = 1


def body_height(screen_h: int) -> int:
    return max(1, screen_h - TAB_BAR_H - STATUS_H)


def detail_size(screen_h: int, screen_w: int) -> tuple[int, int]:
    """Inner (height, width) of the boxed row-detail overlay."""
    return max(1, body_height(screen_h) - 2), max(1, screen_w - 2)


class ScreenLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: tab bar (1 line), body, status bar (1 line)
        self.body_h = body_height(self.H)

        self.tab_win = curses.newwin(TAB_BAR_H, self.W, 0, 0)
        self.tab_win.leaveok(True)

        self.body_win = curses.newwin(self.body_h, self.W, TAB_BAR_H, 0)
        # body never owns the cursor; only text inputs do
        self.body_win.leaveok(True)

        status_y = min(self.H - 1, TAB_BAR_H + self.body_h)
        self.status_win = curses.newwin(STATUS_H, self.W, status_y, 0)
