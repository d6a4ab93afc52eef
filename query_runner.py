import logging
import queue
import threading
from dataclasses import dataclass

import duckdb
import pandas as pd

from table_model import FrameTableModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuerySuccess:
    token: int
    model: FrameTableModel
    text: str


@dataclass(frozen=True)
class QueryFailure:
    token: int
    message: str
    text: str


def _quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _error_message(exc: Exception) -> str:
    msg = str(exc).strip()
    return msg or exc.__class__.__name__


class DuckDbEngine:
    """Runs SQL with the loaded file exposed as a single view."""

    def __init__(self, path: str, table_name: str = "parquet"):
        self.path = path
        self.table_name = table_name

    def connect(self):
        con = duckdb.connect(database=":memory:")
        con.execute(
            f"CREATE VIEW {_quote_ident(self.table_name)} AS "
            f"SELECT * FROM read_parquet({_quote_literal(self.path)})"
        )
        return con

    def execute(self, con, sql: str) -> FrameTableModel:
        rel = con.sql(sql)
        # statements such as SET or CREATE produce no relation
        df = rel.df() if rel is not None else pd.DataFrame()
        return FrameTableModel(df)

    def interrupt(self, con):
        try:
            con.interrupt()
        except duckdb.Error:
            pass

    def close(self, con):
        try:
            con.close()
        except duckdb.Error:
            pass


class QueryRunner:
    """Runs one query at a time off the UI thread.

    Each ``submit`` returns a new token and supersedes the previous submission: its
    connection is interrupted and its eventual result is dropped by ``poll``.
    """

    def __init__(self, engine):
        self.engine = engine
        self._results: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._token = 0
        self._connection = None

    @property
    def current_token(self) -> int:
        with self._lock:
            return self._token

    def submit(self, text: str) -> int:
        with self._lock:
            self._token += 1
            token = self._token
            previous = self._connection
            self._connection = None
        if previous is not None:
            logger.info("query %d supersedes a running query", token)
            self.engine.interrupt(previous)
        logger.debug("submitting query %d: %s", token, text)
        t = threading.Thread(
            target=self._run, args=(token, text), name=f"query-{token}", daemon=True
        )
        t.start()
        return token

    def _run(self, token: int, text: str):
        con = None
        try:
            con = self.engine.connect()
            with self._lock:
                if token != self._token:
                    return
                self._connection = con
            model = self.engine.execute(con, text)
            result = QuerySuccess(token, model, text)
            logger.info("query %d returned %d rows", token, model.row_count())
        except Exception as exc:
            result = QueryFailure(token, _error_message(exc), text)
            logger.info("query %d failed: %s", token, result.message)
        finally:
            with self._lock:
                if con is not None and self._connection is con:
                    self._connection = None
            if con is not None:
                self.engine.close(con)
        self._results.put(result)

    def poll(self) -> list:
        """Drain finished results without blocking; stale ones are discarded."""
        current = self.current_token
        ready = []
        while True:
            try:
                result = self._results.get_nowait()
            except queue.Empty:
                break
            if result.token != current:
                logger.debug("discarding result of superseded query %d", result.token)
                continue
            ready.append(result)
        return ready

    def close(self):
        with self._lock:
            self._token += 1
            con = self._connection
            self._connection = None
        if con is not None:
            self.engine.interrupt(con)
