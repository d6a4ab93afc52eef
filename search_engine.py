import logging
import time

from cell_format import search_text
from parquet_source import ReadError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_ROWS = 8192


class SearchResult(list):
    """Matching row indices, plus how many rows could not be scanned."""

    skipped_rows = 0


def row_matches(row, needle: str) -> bool:
    for value in row:
        if needle in search_text(value):
            return True
    return False


def apply(model, query: str, chunk_rows: int = DEFAULT_CHUNK_ROWS):
    """Return ascending indices of rows with a cell containing ``query``.

    Matching is a case-insensitive substring test against each cell's display text.
    An empty query matches every row and returns ``range(row_count)``.
    """
    if not query:
        return range(model.row_count())

    needle = query.lower()
    started = time.monotonic()
    matches = SearchResult()
    scanned = 0
    try:
        for start, rows in model.scan(chunk_rows):
            for offset, row in enumerate(rows):
                if row_matches(row, needle):
                    matches.append(start + offset)
            scanned = start + len(rows)
    except ReadError as exc:
        matches.skipped_rows = max(0, model.row_count() - scanned)
        logger.warning("search stopped after %d rows: %s", scanned, exc)

    logger.debug(
        "search %r: %d matches in %.3fs",
        query,
        len(matches),
        time.monotonic() - started,
    )
    return matches
