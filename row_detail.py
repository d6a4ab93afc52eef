from dataclasses import dataclass, replace
from typing import Tuple

from cell_format import render_value
from pagination import clamp, max_offset


@dataclass(frozen=True)
class RowDetailSnapshot:
    """Rendered (path, value) pairs of one row, captured when detail opens."""

    title: str
    row_index: int
    fields: Tuple[Tuple[str, str], ...]

    @classmethod
    def capture(cls, columns, row, row_index: int, source_label: str):
        fields = tuple((str(c), render_value(v)) for c, v in zip(columns, row))
        return cls(
            title=f"Row {row_index + 1} ({source_label})",
            row_index=row_index,
            fields=fields,
        )


def wrap_line(text: str, width: int) -> list[str]:
    if width <= 0 or len(text) <= width:
        return [text]
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        if current == "":
            candidate = word
        else:
            candidate = f"{current} {word}"
        if len(candidate) <= width:
            current = candidate
            continue
        if current:
            lines.append(current)
        # hard-break overlong word
        while len(word) > width:
            lines.append(word[:width])
            word = word[width:]
        current = word
    if current or not lines:
        lines.append(current)
    return lines


def layout_lines(fields, width: int, wrap: bool) -> list[str]:
    lines: list[str] = []
    for path, value in fields:
        label = f"{path}: "
        parts = value.split("\n")
        logical = [label + parts[0]] + [" " * len(label) + p for p in parts[1:]]
        for line in logical:
            if wrap:
                lines.extend(wrap_line(line, width))
            else:
                lines.append(line)
    return lines


@dataclass(frozen=True)
class RowDetailView:
    snapshot: RowDetailSnapshot
    height: int
    width: int
    wrap: bool = False
    lines: Tuple[str, ...] = ()
    vscroll: int = 0
    hscroll: int = 0

    @classmethod
    def open(cls, snapshot: RowDetailSnapshot, height: int, width: int, wrap: bool = False):
        view = cls(snapshot=snapshot, height=max(1, height), width=max(1, width), wrap=wrap)
        return view._relayout()

    def _relayout(self):
        lines = tuple(layout_lines(self.snapshot.fields, self.width, self.wrap))
        view = replace(self, lines=lines)
        return view.scroll_to(self.vscroll, self.hscroll)

    @property
    def max_vscroll(self) -> int:
        return max_offset(len(self.lines), self.height)

    @property
    def max_hscroll(self) -> int:
        longest = max((len(line) for line in self.lines), default=0)
        return max_offset(longest, self.width)

    def scroll_to(self, vscroll: int, hscroll: int):
        return replace(
            self,
            vscroll=clamp(vscroll, 0, self.max_vscroll),
            hscroll=clamp(hscroll, 0, self.max_hscroll),
        )

    def scroll(self, dy: int = 0, dx: int = 0):
        return self.scroll_to(self.vscroll + dy, self.hscroll + dx)

    def page(self, dy: int = 0, dx: int = 0):
        return self.scroll(dy * self.height, dx * self.width)

    def resize(self, height: int, width: int):
        return replace(self, height=max(1, height), width=max(1, width))._relayout()

    def visible_lines(self) -> list[str]:
        window = self.lines[self.vscroll : self.vscroll + self.height]
        return [line[self.hscroll : self.hscroll + self.width] for line in window]
