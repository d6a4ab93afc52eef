import logging
import os
from typing import List

logger = logging.getLogger(__name__)


class HistoryManager:
    """SQL query history backed by a plain one-query-per-line file."""

    def __init__(self, history_path: str, max_items: int = 100):
        self.history_path = history_path
        self.max_items = max_items
        self.history: List[str] = []

    def load(self) -> List[str]:
        if not os.path.exists(self.history_path):
            self.history = []
            return self.history
        try:
            with open(self.history_path, "r", encoding="utf-8") as f:
                data = [line.rstrip("\n") for line in f if line.strip()]
        except OSError as exc:
            logger.warning("cannot read history %s: %s", self.history_path, exc)
            data = []
        self.history = data[-self.max_items :]
        return self.history

    def append(self, entry: str) -> None:
        entry = _single_line(entry)
        if not entry:
            return
        if self.history and self.history[-1] == entry:
            return
        self.history.append(entry)
        if len(self.history) > self.max_items:
            self.history = self.history[-self.max_items :]

    def persist(self, entry: str) -> None:
        entry = _single_line(entry)
        if not entry:
            return
        try:
            with open(self.history_path, "a", encoding="utf-8") as f:
                f.write(entry + "\n")
        except OSError as exc:
            logger.warning("cannot write history %s: %s", self.history_path, exc)

    def record(self, entry: str) -> None:
        entry = _single_line(entry)
        if not entry or (self.history and self.history[-1] == entry):
            return
        self.append(entry)
        self.persist(entry)

    @property
    def items(self) -> List[str]:
        return list(self.history)


def _single_line(entry: str) -> str:
    return " ".join((entry or "").split("\n")).strip()
