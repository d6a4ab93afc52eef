from dataclasses import dataclass, replace

from pagination import clamp_index, scroll_to_show


@dataclass(frozen=True)
class Cursor:
    row: int = 0
    column: int = 0
    scroll: int = 0


def fit_cursor(cursor: Cursor, rows: int, cols: int, visible: int) -> Cursor:
    """Re-clamp a cursor after its extent or the viewport changed."""
    row = clamp_index(cursor.row, rows)
    return Cursor(
        row=row,
        column=clamp_index(cursor.column, cols),
        scroll=scroll_to_show(row, cursor.scroll, visible, rows),
    )


def move_row(cursor: Cursor, delta: int, rows: int, visible: int) -> Cursor:
    row = clamp_index(cursor.row + delta, rows)
    return replace(cursor, row=row, scroll=scroll_to_show(row, cursor.scroll, visible, rows))


def page_row(cursor: Cursor, direction: int, rows: int, visible: int) -> Cursor:
    return move_row(cursor, direction * max(1, visible), rows, visible)


def move_column(cursor: Cursor, delta: int, cols: int) -> Cursor:
    return replace(cursor, column=clamp_index(cursor.column + delta, cols))
