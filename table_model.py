import logging

import pandas as pd

from data_model import ReadErrorCell
from parquet_source import ReadError

logger = logging.getLogger(__name__)


class TableModel:
    """Randomly indexable rows and columns behind a bounded window."""

    def row_count(self) -> int:
        raise NotImplementedError

    def column_count(self) -> int:
        return len(self.columns)

    def column_name(self, i: int) -> str:
        return self.columns[i]

    def materialize(self, start: int, count: int) -> list[tuple]:
        raise NotImplementedError

    def row(self, index: int) -> tuple:
        rows = self.materialize(index, 1)
        return rows[0]

    def scan(self, chunk_rows: int):
        raise NotImplementedError

    def _check_index(self, row: int, col: int):
        if not 0 <= row < self.row_count():
            raise IndexError(f"row {row} out of range 0..{self.row_count() - 1}")
        if not 0 <= col < self.column_count():
            raise IndexError(f"column {col} out of range 0..{self.column_count() - 1}")

    def cell(self, row: int, col: int):
        self._check_index(row, col)
        return self.row(row)[col]

    def rows_at(self, indices) -> list[tuple]:
        indices = list(indices)
        if not indices:
            return []
        lo, hi = min(indices), max(indices)
        window = self.materialize(lo, hi - lo + 1)
        return [window[i - lo] for i in indices]


class SourceTableModel(TableModel):
    """TableModel over a ParquetSource with a single cached row window."""

    def __init__(self, source, max_window_span: int = 4096):
        self.source = source
        self.columns = list(source.columns)
        self.max_window_span = max_window_span
        self._window_start = 0
        self._window_rows: list[tuple] | None = None
        self._window_count = 0
        self.fetch_count = 0

    def row_count(self) -> int:
        return self.source.row_count()

    def _error_rows(self, count: int, exc: Exception) -> list[tuple]:
        placeholder = ReadErrorCell(str(exc))
        return [tuple(placeholder for _ in self.columns) for _ in range(count)]

    def _read(self, start: int, count: int) -> list[tuple]:
        self.fetch_count += 1
        try:
            return self.source.fetch_rows(start, count)
        except ReadError as exc:
            logger.warning("read failed at rows %d+%d: %s", start, count, exc)
            return self._error_rows(min(count, self.row_count() - start), exc)

    def materialize(self, start: int, count: int) -> list[tuple]:
        total = self.row_count()
        start = max(0, start)
        count = max(0, min(count, total - start))
        if count == 0:
            return []
        if (
            self._window_rows is not None
            and self._window_start == start
            and self._window_count == count
        ):
            return self._window_rows
        rows = self._read(start, count)
        self._window_start = start
        self._window_count = count
        self._window_rows = rows
        return rows

    def row(self, index: int) -> tuple:
        if self._window_rows is not None:
            offset = index - self._window_start
            if 0 <= offset < len(self._window_rows):
                return self._window_rows[offset]
        # out-of-window single reads leave the cached window alone
        rows = self._read(index, 1)
        if not rows:
            raise IndexError(f"row {index} out of range")
        return rows[0]

    def rows_at(self, indices) -> list[tuple]:
        indices = list(indices)
        if not indices:
            return []
        lo, hi = min(indices), max(indices)
        if hi - lo + 1 <= self.max_window_span:
            return super().rows_at(indices)
        return [self.row(i) for i in indices]

    def scan(self, chunk_rows: int):
        yield from self.source.iter_batches(chunk_rows)


class FrameTableModel(TableModel):
    """Fully materialized rows, used for SQL results."""

    def __init__(self, df: pd.DataFrame):
        self.df = df
        self.columns = [str(c) for c in df.columns]
        # object rows keep nested values (lists, dicts) intact
        self._rows = list(df.astype(object).itertuples(index=False, name=None))

    def row_count(self) -> int:
        return len(self._rows)

    def materialize(self, start: int, count: int) -> list[tuple]:
        start = max(0, start)
        return self._rows[start : start + max(0, count)]

    def row(self, index: int) -> tuple:
        return self._rows[index]

    def scan(self, chunk_rows: int):
        for start in range(0, len(self._rows), chunk_rows):
            yield start, self._rows[start : start + chunk_rows]
