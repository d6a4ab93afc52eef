import curses

import events as ev
from view_state import Mode, Tab

KEY_ESC = 27
KEY_TAB = 9
KEY_CTRL_C = 3
KEY_CTRL_N = 14
KEY_CTRL_P = 16
KEY_CTRL_V = 22
KEY_CTRL_X = 24

ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (8, 127, curses.KEY_BACKSPACE)

ARROWS = {
    curses.KEY_UP: ev.Direction.UP,
    curses.KEY_DOWN: ev.Direction.DOWN,
    curses.KEY_LEFT: ev.Direction.LEFT,
    curses.KEY_RIGHT: ev.Direction.RIGHT,
}

PAGES = {
    curses.KEY_PPAGE: ev.Direction.UP,
    curses.KEY_NPAGE: ev.Direction.DOWN,
}


def _printable(ch: int) -> str | None:
    if 32 <= ch < 127:
        return chr(ch)
    return None


def translate(ch: int, view, screen_size=None):
    """Map one raw curses key code to an abstract event for the current state.

    Returns None for keys that mean nothing in the current (tab, mode).
    """
    if ch == -1:
        return None
    if ch in (KEY_CTRL_C, KEY_CTRL_X):
        return ev.Quit()
    if ch == curses.KEY_RESIZE:
        if screen_size is None:
            return None
        return ev.Resize(*screen_size)

    if view.mode is Mode.ROW_DETAIL:
        return _detail_key(ch)
    if view.mode is Mode.SEARCH_INPUT:
        return _search_key(ch)
    return _normal_key(ch, view.tab)


def _detail_key(ch: int):
    if ch in (KEY_ESC, ord("q")):
        return ev.CancelOrClear()
    if ch in ARROWS:
        return ev.ScrollDetail(ARROWS[ch])
    if ch in PAGES:
        return ev.PageScrollDetail(PAGES[ch])
    return None


def _search_key(ch: int):
    if ch == KEY_ESC:
        return ev.CancelOrClear()
    if ch in ENTER_KEYS:
        return ev.CommitSearch()
    if ch in BACKSPACE_KEYS:
        return ev.Backspace()
    char = _printable(ch)
    if char is not None:
        return ev.EditSearchChar(char)
    return None


def _normal_key(ch: int, tab: Tab):
    if ch == KEY_TAB:
        return ev.NextTab()
    if ch == curses.KEY_BTAB:
        return ev.PrevTab()
    if ch == KEY_ESC:
        return ev.CancelOrClear()
    if ch in ARROWS:
        direction = ARROWS[ch]
        if direction.dy:
            return ev.MoveCursor(direction)
        return ev.MoveColumn(direction)
    if ch in PAGES:
        return ev.PageMove(PAGES[ch])

    if tab is Tab.SQL:
        return _sql_key(ch)
    if tab is Tab.VISUALIZE:
        if ch == ord("/"):
            return ev.StartSearch()
        if ch in (ord("v"), ord("V")) or ch in ENTER_KEYS:
            return ev.OpenRowDetail()
    return None


def _sql_key(ch: int):
    # the SQL tab's normal mode is its editor: printable keys are query text
    if ch in ENTER_KEYS:
        return ev.SubmitQuery()
    if ch in BACKSPACE_KEYS:
        return ev.Backspace()
    if ch == KEY_CTRL_V:
        return ev.OpenRowDetail()
    if ch == KEY_CTRL_P:
        return ev.RecallQuery(ev.Direction.UP)
    if ch == KEY_CTRL_N:
        return ev.RecallQuery(ev.Direction.DOWN)
    char = _printable(ch)
    if char is not None:
        return ev.EditQueryChar(char)
    return None
