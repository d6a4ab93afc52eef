from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def dy(self) -> int:
        return self.value[0]

    @property
    def dx(self) -> int:
        return self.value[1]


@dataclass(frozen=True)
class NextTab:
    pass


@dataclass(frozen=True)
class PrevTab:
    pass


@dataclass(frozen=True)
class StartSearch:
    pass


@dataclass(frozen=True)
class EditSearchChar:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class CommitSearch:
    pass


@dataclass(frozen=True)
class CancelOrClear:
    pass


@dataclass(frozen=True)
class MoveCursor:
    direction: Direction


@dataclass(frozen=True)
class PageMove:
    direction: Direction


@dataclass(frozen=True)
class MoveColumn:
    direction: Direction


@dataclass(frozen=True)
class OpenRowDetail:
    pass


@dataclass(frozen=True)
class EditQueryChar:
    char: str


@dataclass(frozen=True)
class SubmitQuery:
    pass


@dataclass(frozen=True)
class RecallQuery:
    direction: Direction  # UP = older, DOWN = newer


@dataclass(frozen=True)
class ScrollDetail:
    direction: Direction


@dataclass(frozen=True)
class PageScrollDetail:
    direction: Direction


@dataclass(frozen=True)
class Resize:
    height: int
    width: int


@dataclass(frozen=True)
class Quit:
    pass
