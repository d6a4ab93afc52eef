import logging
import os
from bisect import bisect_right
from collections import Counter

import pyarrow as pa
import pyarrow.parquet as pq

from data_model import (
    ColumnStats,
    Field,
    FileMetadata,
    GroupType,
    PrimitiveType,
    RowGroupMeta,
    Schema,
)

logger = logging.getLogger(__name__)


class OpenError(Exception):
    """The file is missing, unreadable or not a Parquet file."""


class ReadError(Exception):
    """Decoding a row window failed part way through the file."""


def _convert_type(arrow_type) -> tuple:
    if pa.types.is_struct(arrow_type):
        children = tuple(
            _convert_field(arrow_type.field(i)) for i in range(arrow_type.num_fields)
        )
        return GroupType("struct", children)
    if pa.types.is_map(arrow_type):
        children = (
            _convert_field(arrow_type.key_field),
            _convert_field(arrow_type.item_field),
        )
        return GroupType("map", children)
    if pa.types.is_large_list(arrow_type):
        return GroupType("large_list", (_convert_field(arrow_type.value_field),))
    if pa.types.is_fixed_size_list(arrow_type):
        return GroupType("fixed_size_list", (_convert_field(arrow_type.value_field),))
    if pa.types.is_list(arrow_type):
        return GroupType("list", (_convert_field(arrow_type.value_field),))
    return PrimitiveType(str(arrow_type))


def _convert_field(arrow_field) -> Field:
    return Field(
        name=arrow_field.name,
        type=_convert_type(arrow_field.type),
        nullable=bool(arrow_field.nullable),
    )


def schema_from_arrow(arrow_schema) -> Schema:
    return Schema(tuple(_convert_field(f) for f in arrow_schema))


def _flatten_structs(table):
    while any(pa.types.is_struct(f.type) for f in table.schema):
        table = table.flatten()
    return table


def _stat_value(stats, attr):
    if stats is None or not stats.has_min_max:
        return None
    try:
        return getattr(stats, attr)
    except (pa.ArrowException, ValueError, TypeError):
        # some logical types (e.g. INT96 timestamps) cannot be decoded
        return None


def _column_stats(col) -> ColumnStats:
    stats = col.statistics if col.is_stats_set else None
    null_count = None
    distinct_count = None
    if stats is not None:
        if stats.has_null_count:
            null_count = stats.null_count
        if stats.has_distinct_count:
            distinct_count = stats.distinct_count
    return ColumnStats(
        path=col.path_in_schema,
        physical_type=str(col.physical_type),
        min=_stat_value(stats, "min"),
        max=_stat_value(stats, "max"),
        null_count=null_count,
        distinct_count=distinct_count,
        compression=str(col.compression),
        encodings=tuple(str(e) for e in col.encodings),
        compressed_size=int(col.total_compressed_size or 0),
        uncompressed_size=int(col.total_uncompressed_size or 0),
    )


def _decode_kv(raw) -> tuple:
    if not raw:
        return ()
    pairs = []
    for key, value in raw.items():
        k = key.decode("utf-8", errors="replace") if isinstance(key, bytes) else str(key)
        v = (
            value.decode("utf-8", errors="replace")
            if isinstance(value, bytes)
            else str(value)
        )
        pairs.append((k, v))
    return tuple(pairs)


class ParquetSource:
    """Read-only access to one Parquet file through pyarrow.

    Metadata is read once from the footer at open time. Rows are fetched on demand,
    one row-group span at a time, so the whole file is never decoded at once.
    """

    def __init__(self, path: str, parquet_file):
        self.path = path
        self._pf = parquet_file
        md = parquet_file.metadata

        self.schema = schema_from_arrow(parquet_file.schema_arrow)
        self.columns = self.schema.column_paths()
        self.row_groups = self._read_row_groups(md)
        self.metadata = self._read_file_metadata(md)

        # cumulative row offsets for row-group lookup
        self._group_starts: list[int] = []
        total = 0
        for rg in self.row_groups:
            self._group_starts.append(total)
            total += rg.num_rows
        self._num_rows = total

    @classmethod
    def open(cls, path: str) -> "ParquetSource":
        if not path or not os.path.exists(path):
            raise OpenError(f"file not found: {path}")
        if os.path.isdir(path):
            raise OpenError(f"not a file: {path}")
        try:
            pf = pq.ParquetFile(path)
        except (OSError, pa.ArrowException) as exc:
            raise OpenError(f"cannot read {path}: {exc}") from exc
        source = cls(path, pf)
        logger.info(
            "opened %s: %d rows, %d row groups, %d columns",
            path,
            source.row_count(),
            len(source.row_groups),
            len(source.columns),
        )
        return source

    def close(self):
        self._pf.close()

    def row_count(self) -> int:
        return self._num_rows

    def _read_row_groups(self, md) -> list[RowGroupMeta]:
        groups = []
        for i in range(md.num_row_groups):
            rg = md.row_group(i)
            cols = tuple(_column_stats(rg.column(j)) for j in range(rg.num_columns))
            groups.append(
                RowGroupMeta(
                    index=i,
                    num_rows=int(rg.num_rows),
                    total_byte_size=int(rg.total_byte_size),
                    compressed_size=sum(c.compressed_size for c in cols),
                    columns=cols,
                )
            )
        return groups

    def _read_file_metadata(self, md) -> FileMetadata:
        encodings: Counter = Counter()
        compressions: Counter = Counter()
        compressed = 0
        uncompressed = 0
        for rg in self.row_groups:
            for col in rg.columns:
                encodings.update(col.encodings)
                compressions[col.compression] += 1
                compressed += col.compressed_size
                uncompressed += col.uncompressed_size
        try:
            file_size = os.path.getsize(self.path)
        except OSError:
            file_size = 0
        return FileMetadata(
            path=self.path,
            format_version=str(md.format_version),
            created_by=md.created_by or "",
            num_rows=int(md.num_rows),
            num_row_groups=int(md.num_row_groups),
            num_columns=int(md.num_columns),
            file_size=file_size,
            serialized_size=int(md.serialized_size),
            compressed_size=compressed,
            uncompressed_size=uncompressed,
            encodings=tuple(sorted(encodings.items())),
            compressions=tuple(sorted(compressions.items())),
            key_value_metadata=_decode_kv(md.metadata),
        )

    def _group_for_row(self, row: int) -> int:
        return max(0, bisect_right(self._group_starts, row) - 1)

    def fetch_rows(self, start: int, count: int) -> list[tuple]:
        """Return up to ``count`` rows from ``start``; short at end of file."""
        if start < 0 or count < 0:
            raise ValueError("start and count must be >= 0")
        if count == 0 or start >= self._num_rows:
            return []
        end = min(self._num_rows, start + count)
        first = self._group_for_row(start)
        last = self._group_for_row(end - 1)
        try:
            table = self._pf.read_row_groups(list(range(first, last + 1)))
            offset = start - self._group_starts[first]
            table = _flatten_structs(table.slice(offset, end - start))
            columns = [table.column(i).to_pylist() for i in range(table.num_columns)]
        except (OSError, pa.ArrowException) as exc:
            raise ReadError(f"rows {start}-{end - 1}: {exc}") from exc
        return list(zip(*columns)) if columns else [() for _ in range(end - start)]

    def iter_batches(self, batch_rows: int):
        """Yield ``(start, rows)`` over the whole file in row order."""
        start = 0
        try:
            for batch in self._pf.iter_batches(batch_size=batch_rows):
                table = _flatten_structs(pa.Table.from_batches([batch]))
                columns = [
                    table.column(i).to_pylist() for i in range(table.num_columns)
                ]
                rows = list(zip(*columns)) if columns else [()] * batch.num_rows
                yield start, rows
                start += batch.num_rows
        except (OSError, pa.ArrowException) as exc:
            raise ReadError(f"scan failed after row {start}: {exc}") from exc
